import random
import re
import string

TICKET_ID_PREFIX = "SPTX-TX-"
TICKET_ID_PATTERN = re.compile(r"^SPTX-TX-\d{2,8}[A-Z]\d{0,7}[A-Z]\d{0,7}$")

_rng = random.SystemRandom()

def generate_ticket_id(rng: random.Random | None = None) -> str:
    """Return an id like ``SPTX-TX-4817K203Q55``.

    Eight digits (first one non-zero) with two uppercase letters spliced in at
    two random cut points. The first run keeps at least two digits and the
    middle run at least one; the last run may be empty.
    """
    r = rng or _rng
    digits = str(r.randint(10_000_000, 99_999_999))
    first, second = r.choice(string.ascii_uppercase), r.choice(string.ascii_uppercase)
    pos1 = r.randint(2, len(digits) - 1)
    pos2 = r.randint(pos1 + 1, len(digits))
    return f"{TICKET_ID_PREFIX}{digits[:pos1]}{first}{digits[pos1:pos2]}{second}{digits[pos2:]}"
