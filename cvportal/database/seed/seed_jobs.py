from cvportal.extensions import db
from cvportal.models import Job
from datetime import datetime


def seed():
    print("🌱 Seeding jobs...")

    jobs = [
        Job(
            title="Data Engineer",
            description=(
                "Responsible for designing, developing, and maintaining data pipelines (ETL). "
                "Will work with large datasets, cloud platforms, and data warehousing solutions "
                "to support business intelligence and analytics."
            ),
            requirements=(
                "Minimum 2 years of experience in data engineering. "
                "Proficiency in SQL and Python. Experience with ETL processes, "
                "Airflow and data warehouse concepts. AWS, GCP or Azure is a strong plus."
            ),
            location="Istanbul",
            department="Data",
            experience_level="Mid",
            employment_type="Full-time",
            created_at=datetime.utcnow(),
        ),
        Job(
            title="Senior Frontend Developer",
            description=(
                "Build and maintain the customer-facing web application together with "
                "designers and backend engineers."
            ),
            requirements=(
                "5+ years of experience with React and TypeScript. "
                "Strong CSS, REST API integration, testing with Jest."
            ),
            location="Remote",
            department="Engineering",
            experience_level="Senior",
            employment_type="Full-time",
            created_at=datetime.utcnow(),
        ),
    ]

    for job in jobs:
        existing_job = Job.query.filter_by(title=job.title).first()
        if existing_job:
            print(f"⚠️ Job '{job.title}' already exists. Skipping insert.")
            continue
        db.session.add(job)

    db.session.commit()
    print("✅ Jobs seeded successfully!")
