import datetime
from functools import lru_cache


def easter_sunday(year: int) -> datetime.date:
    """Anonymous Gregorian algorithm."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return datetime.date(year, month, day)


def sexta_feira_santa(year: int) -> datetime.date:
    """Good Friday: Friday before Easter Sunday."""
    return easter_sunday(year) - datetime.timedelta(days=2)


def corpo_de_deus(year: int) -> datetime.date:
    """Corpus Christi: Thursday 60 days after Easter Sunday."""
    return easter_sunday(year) + datetime.timedelta(days=60)


# Fixed-date national holidays (month, day, name)
_FIXED_HOLIDAYS: tuple[tuple[int, int, str], ...] = (
    (1, 1, "Ano Novo"),
    (4, 25, "Dia da Liberdade"),
    (5, 1, "Dia do Trabalhador"),
    (6, 10, "Dia de Portugal"),
    (8, 15, "Assunção de Nossa Senhora"),
    (10, 5, "Implantação da República"),
    (11, 1, "Dia de Todos os Santos"),
    (12, 1, "Restauração da Independência"),
    (12, 8, "Imaculada Conceição"),
    (12, 25, "Natal"),
)


@lru_cache(maxsize=32)
def national_holidays(year: int) -> dict[datetime.date, str]:
    """All Portuguese national (mandatory) holidays of a year, date -> name."""
    holidays = {datetime.date(year, month, day): name for month, day, name in _FIXED_HOLIDAYS}
    holidays[sexta_feira_santa(year)] = "Sexta-feira Santa"
    holidays[easter_sunday(year)] = "Páscoa"
    holidays[corpo_de_deus(year)] = "Corpo de Deus"
    return holidays


def is_bank_holiday(day: datetime.date) -> bool:
    return day in national_holidays(day.year)


def holiday_name(day: datetime.date) -> str | None:
    return national_holidays(day.year).get(day)
