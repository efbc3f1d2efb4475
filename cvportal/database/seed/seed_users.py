from flask import current_app

from cvportal.services.auth import AuthService


def seed():
    print("🌱 Seeding HR users...")

    created = AuthService.ensure_hr_user(
        current_app.config["SEED_HR_EMAIL"],
        current_app.config["SEED_HR_PASSWORD"],
    )

    if created:
        print("✅ HR users seeded successfully!")
    else:
        print("⚠️ HR user already exists. Skipping insert.")
