"""Display helpers: node labels, ages, birthdays and generation colors."""

from datetime import date

# generation -> (background, border)
GENERATION_COLORS = {
    1: ("#fff5e6", "#ffa500"),
    2: ("#e6f3ff", "#4a90e2"),
    3: ("#f0f8f0", "#5cb85c"),
    4: ("#fff0f5", "#ff69b4"),
}
DEFAULT_COLORS = ("#ffffff", "#dee2e6")
BIRTHDAY_COLORS = ("#ffe5e5", "#e74c3c")
JUNCTION_COLOR = "#7f8c8d"


def calculate_age(birth_date: date, today: date) -> int:
    """Completed years between `birth_date` and `today`."""
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_months(birth_date: date, today: date) -> int:
    """Months past the last completed year of age (0-11)."""
    total_months = (today.year - birth_date.year) * 12 + today.month - birth_date.month
    if today.day < birth_date.day:
        total_months -= 1
    return total_months - calculate_age(birth_date, today) * 12


def format_age(birth_date: date, today: date) -> str:
    age = calculate_age(birth_date, today)
    months = calculate_months(birth_date, today)
    if months > 0:
        return f"{age} years {months} months"
    return f"{age} years"


def is_birthday(birth_date: date, today: date) -> bool:
    return (birth_date.month, birth_date.day) == (today.month, today.day)


def person_label(name: str, birth_date: date, today: date, show_age: bool = False) -> str:
    lines = [name, birth_date.isoformat()]
    if show_age:
        lines.append(format_age(birth_date, today))
    return "\n".join(lines)


def node_colors(generation: int, birthday: bool = False) -> tuple[str, str]:
    """(background, border) for a person node."""
    if birthday:
        return BIRTHDAY_COLORS
    return GENERATION_COLORS.get(generation, DEFAULT_COLORS)
