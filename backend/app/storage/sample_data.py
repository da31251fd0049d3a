"""
Starter records so a fresh deployment has something to show.

Ids are fixed so links shared from a demo keep working across restarts.
"""

from datetime import datetime, timedelta
from typing import Any

SAMPLE_COMPANIES: list[dict[str, Any]] = [
    {
        "id": "accenture-id",
        "name": "Accenture",
        "description": "A leading global professional services company",
        "website": "https://www.accenture.com",
        "linkedin_url": "https://www.linkedin.com/company/accenture",
        "logo": "https://logoeps.com/wp-content/uploads/2014/05/36208-accenture-vector-logo.png",
        "location": "Bengaluru, India",
    },
    {
        "id": "tcs-id",
        "name": "Tata Consultancy Services",
        "description": "An Indian multinational IT services and consulting company",
        "website": "https://www.tcs.com",
        "linkedin_url": "https://www.linkedin.com/company/tata-consultancy-services",
        "logo": "https://logoeps.com/wp-content/uploads/2013/03/tcs-vector-logo.png",
        "location": "Mumbai, India",
    },
    {
        "id": "infosys-id",
        "name": "Infosys",
        "description": "A global leader in next-generation digital services and consulting",
        "website": "https://www.infosys.com",
        "linkedin_url": "https://www.linkedin.com/company/infosys",
        "logo": "https://logoeps.com/wp-content/uploads/2013/03/infosys-vector-logo.png",
        "location": "Bengaluru, India",
    },
]

# closing_date is filled in relative to seeding time.
SAMPLE_JOBS: list[dict[str, Any]] = [
    {
        "id": "job-1",
        "company_id": "accenture-id",
        "title": "Software Developer - Fresher",
        "description": (
            "Join our dynamic team as a Software Developer. Perfect opportunity for fresh "
            "graduates to kick-start their career in technology."
        ),
        "requirements": "Strong programming fundamentals, Problem-solving skills, Team collaboration",
        "qualifications": (
            "Bachelor's degree in Computer Science, IT, or related field. Good academic record "
            "with minimum 60% throughout academics."
        ),
        "skills": "Java, Python, JavaScript, SQL, Git, Problem-solving, Communication",
        "experience_level": "fresher",
        "experience_min": 0,
        "experience_max": 1,
        "location": "Bengaluru, Chennai, Hyderabad",
        "job_type": "full-time",
        "salary": "₹3.5 - 4.5 LPA",
        "apply_url": "https://accenture.com/careers/apply",
        "closing_in_days": 15,
        "batch_eligible": "2023, 2024",
        "is_active": True,
    },
]

SAMPLE_COURSES: list[dict[str, Any]] = [
    {
        "id": "python-course",
        "title": "Python Programming for Beginners",
        "description": "Master Python programming from basics to advanced concepts.",
        "instructor": "Jane Smith",
        "duration": "8 weeks",
        "level": "beginner",
        "category": "programming",
        "image_url": "/images/python-course.jpg",
        "course_url": "https://www.python.org/about/gettingstarted/",
        "price": "₹2,999",
    },
]


def sample_jobs(now: datetime) -> list[dict[str, Any]]:
    jobs = []
    for template in SAMPLE_JOBS:
        values = {k: v for k, v in template.items() if k != "closing_in_days"}
        values["closing_date"] = now + timedelta(days=template["closing_in_days"])
        jobs.append(values)
    return jobs
