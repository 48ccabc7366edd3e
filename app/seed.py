"""
Load sample users and events.

Safe to run more than once: existing users are kept and events are only
created when the catalog is empty.
"""
import logging
from datetime import datetime, timedelta

import auth
import models
from database import SessionLocal, engine

logger = logging.getLogger(__name__)

STUDENT_EMAILS = [f"student{i}@srmist.edu.in" for i in range(1, 6)]

# title, category, venue, (day offset, start hour, end hour), price, price type, capacity
SAMPLE_EVENTS = [
    ("AI/ML Bootcamp", "Tech", "Tech Park", (1, 9, 14), 0, "free", 150),
    ("Cybersecurity 101", "Tech", "Library Hall", (2, 14, 18), 199, "paid", 120),
    ("Music Night", "Cultural", "Main Auditorium", (3, 18, 21), 0, "free", 500),
    ("Dance Workshop", "Cultural", "Seminar Hall", (4, 14, 18), 99, "paid", 200),
    ("Cricket Tournament", "Sports", "Sports Complex", (5, 9, 14), 0, "free", 300),
    ("Basketball League", "Sports", "Sports Complex", (6, 14, 18), 0, "free", 250),
    ("Guest Lecture: AI Ethics", "Academic", "Seminar Hall", (7, 9, 14), 0, "donation", 200),
    ("Research Presentations", "Academic", "Library Hall", (8, 14, 18), 0, "free", 100),
    ("Fresher's Party", "Social", "Main Auditorium", (9, 18, 22), 299, "paid", 400),
    ("Alumni Meet", "Social", "Tech Park", (10, 14, 18), 0, "donation", 350),
]


def upsert_user(db, name, email, password, role):
    user = db.query(models.User).filter(models.User.email == email).first()
    if user:
        return user
    user = models.User(name=name, email=email, hashed_password=auth.get_password_hash(password), role=role)
    db.add(user)
    db.flush()
    return user


def seed(db, today=None):
    today = today or datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)

    upsert_user(db, "SRM Admin", "admin@srmist.edu.in", "admin123", models.Role.ADMIN)
    organizers = [
        upsert_user(db, "Organizer One", "organizer1@srmist.edu.in", "organizer123", models.Role.ORGANIZER),
        upsert_user(db, "Organizer Two", "organizer2@srmist.edu.in", "organizer123", models.Role.ORGANIZER),
    ]
    for email in STUDENT_EMAILS:
        upsert_user(db, email.split("@")[0], email, "student123", models.Role.STUDENT)

    if db.query(models.Event).count() == 0:
        for i, (title, category, venue, (day, start, end), price, price_type, capacity) in enumerate(SAMPLE_EVENTS):
            event = models.Event(
                title=title,
                description=f"{title} at {venue}",
                venue=venue,
                category=category,
                start_time=today + timedelta(days=day, hours=start),
                end_time=today + timedelta(days=day, hours=end),
                capacity=capacity,
                price=price,
                price_type=price_type,
                organizer_id=organizers[i % 2].id,
            )
            event.analytics = models.Analytics(registrations_count=0, revenue=0)
            db.add(event)

    db.commit()
    logger.info("Seed completed")


def main():
    logging.basicConfig(level=logging.INFO)
    models.Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed(db)


if __name__ == "__main__":
    main()
