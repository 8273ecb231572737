import argparse
import os
import random
import string
import sys

# Ensure project root is importable when running from scripts/
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from utils.errors import DuplicatePayment, ValidationError  # noqa: E402
from utils.ledger import FeeLedger  # noqa: E402
from utils.periods import shift_months_back  # noqa: E402
from utils.roster import Roster  # noqa: E402
from utils.timezone_helpers import local_today  # noqa: E402


FIRST_NAMES = [
    "Ahmed", "Ayesha", "Bilal", "Fatima", "Hamza", "Hira", "Ibrahim", "Khadija",
    "Maryam", "Muhammad", "Omar", "Sana", "Usman", "Zainab", "Yusuf", "Aisha",
]

LAST_NAMES = [
    "Khan", "Qureshi", "Siddiqui", "Malik", "Sheikh", "Butt", "Chaudhry", "Hussain",
    "Raza", "Iqbal", "Ansari", "Mirza",
]

FLATS = ["Ramsha Avenue", "Gulshan Heights", "Noor Residency", "Al-Madina Tower"]

FEES = [1000, 1500, 2000, 2500]


class SeedConfig(Config):
    SCHEDULER_ENABLED = False


def random_phone() -> str:
    # Pakistani mobile numbers (+923XXXXXXXXX)
    return "+923" + "".join(random.choice(string.digits) for _ in range(9))


def random_student() -> dict:
    return {
        "fullName": f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
        "phone": random_phone(),
        "flatName": random.choice(FLATS),
        "flatNo": f"{random.choice('ABCD')}-{random.randint(1, 20)}{random.randint(1, 8):02d}",
        "monthlyFee": random.choice(FEES),
        "feeDueDate": random.choice([5, 10, 10, 15]),
    }


def seed(count: int = 50, months: int = 6, paid_ratio: float = 0.8) -> tuple[int, int]:
    roster, ledger = Roster(), FeeLedger()
    today = local_today()
    students = []
    for _ in range(count):
        try:
            students.append(roster.create(random_student()))
        except ValidationError:
            # phone collision, skip
            continue

    payments = 0
    for student in students:
        for i in range(months):
            month, year = shift_months_back(today.month, today.year, i)
            if random.random() > paid_ratio:
                continue
            try:
                ledger.record_payment(student.id, student.monthly_fee, month, year, method="cash")
                payments += 1
            except DuplicatePayment:
                continue
    return len(students), payments


def main():
    parser = argparse.ArgumentParser(description="Seed demo students and fee payments.")
    parser.add_argument("--count", type=int, default=50, help="How many students to add (default: 50)")
    parser.add_argument("--months", type=int, default=6, help="Months of payment history (default: 6)")
    parser.add_argument("--paid-ratio", type=float, default=0.8, help="Share of periods marked paid (default: 0.8)")
    args = parser.parse_args()

    app = create_app(SeedConfig)
    with app.app_context():
        students, payments = seed(args.count, args.months, args.paid_ratio)
    print(f"Inserted {students} students and {payments} fee payments.")


if __name__ == "__main__":
    main()
