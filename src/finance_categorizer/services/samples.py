import random
from calendar import monthrange
from datetime import date

from finance_categorizer.domain.locales import DEFAULT_LOCALE, LocaleProfile
from finance_categorizer.models import Transaction

INCOME_SHARE = 0.15
MANUAL_SHARE = 0.7


def _shift_month(day: date, months_back: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


def generate_sample_transactions(
    months: int = 3,
    per_month: int = 15,
    rng: random.Random | None = None,
    today: date | None = None,
    locale: LocaleProfile = DEFAULT_LOCALE,
) -> list[Transaction]:
    """
    Produce demo transactions spread over the last ``months`` months, newest
    first. Categories are left empty so the result can be fed straight into
    the categorizer.
    """
    rng = rng or random.Random()
    today = today or date.today()
    descriptions = locale.sample_descriptions
    accounts = locale.sample_accounts or ("",)
    if not descriptions:
        return []

    transactions: list[Transaction] = []
    for months_back in range(months - 1, -1, -1):
        first_day = _shift_month(today, months_back)
        days_in_month = monthrange(first_day.year, first_day.month)[1]

        for _ in range(per_month):
            if rng.random() < INCOME_SHARE:
                amount = float(rng.randint(2000, 9999))
            else:
                amount = -float(rng.randint(10, 509))

            transactions.append(Transaction(
                id=f"tx_{rng.getrandbits(48):012x}",
                date=first_day.replace(day=rng.randint(1, days_in_month)),
                description=rng.choice(descriptions),
                amount=amount,
                account=rng.choice(accounts),
                is_manual=rng.random() < MANUAL_SHARE,
            ))

    transactions.sort(key=lambda t: t.date, reverse=True)
    return transactions
