from decimal import ROUND_HALF_UP, Decimal

RUPEE = "₹"
_LAKH = Decimal("100000")
_CRORE = Decimal("10000000")


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(value, decimals: int = 2) -> str:
    amount = Decimal(str(value or 0))
    quantum = Decimal(1).scaleb(-decimals)
    amount = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    text = "{:f}".format(abs(amount))
    whole, _, fraction = text.partition(".")
    result = RUPEE + _group_indian(whole)
    if decimals > 0:
        result += "." + fraction
    return sign + result


def format_inr_compact(value) -> str:
    amount = Decimal(str(value or 0))
    if amount >= _CRORE:
        return "{}{}Cr".format(RUPEE, (amount / _CRORE).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    if amount >= _LAKH:
        return "{}{}L".format(RUPEE, (amount / _LAKH).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    return format_inr(amount, decimals=0)
