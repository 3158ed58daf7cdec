import logging

from .errors import InvalidInputError
from .models import ChangeCategory

logger = logging.getLogger("change_engine.classifier")

YES_ANSWERS = {"yes", "y", "true"}
NO_ANSWERS = {"no", "n", "false"}


def classify_change(service_down: bool, pre_approved: bool) -> ChangeCategory:
    """
    Classification decision tree:

        Is the service currently down or critically degraded?
        ├── yes -> Emergency
        └── no  -> Is this a pre-approved change model?
                  ├── yes -> Standard
                  └── no  -> Normal

    service_down is checked first, so an outage always wins.
    """
    if service_down:
        category = ChangeCategory.EMERGENCY
    elif pre_approved:
        category = ChangeCategory.STANDARD
    else:
        category = ChangeCategory.NORMAL

    logger.debug(f"Classified change (service_down={service_down}, pre_approved={pre_approved}) as {category.value}")
    return category


def parse_answer(raw, question: str = "answer") -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw or "").strip().lower()
    if text in YES_ANSWERS:
        return True
    if text in NO_ANSWERS:
        return False
    if not text:
        raise InvalidInputError(f"Missing yes/no {question}.")
    raise InvalidInputError(f"Unrecognised yes/no {question}: {raw!r}")
