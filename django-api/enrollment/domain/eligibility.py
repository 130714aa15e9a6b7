"""Family-discount eligibility.

Precedence, first set value wins:

1. manual override (the user toggled the discount)
2. explicit flag given when the student was added
3. automatic: eligible when the cart already holds another student
"""

from enrollment.domain.models import FamilyDiscountChoice


def resolve_eligibility(
    explicit: FamilyDiscountChoice,
    override: FamilyDiscountChoice,
    current_cart_size: int,
) -> bool:
    """Decide whether a student being added counts as a second-or-later dancer."""
    for choice in (override, explicit):
        if choice is not FamilyDiscountChoice.UNSET:
            return choice is FamilyDiscountChoice.ELIGIBLE
    return current_cart_size > 0
