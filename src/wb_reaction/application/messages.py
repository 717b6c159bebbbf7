"""Human-readable notification text."""

WELCOME_MSG = """Congratulations! You have been given your first willowbuck!

You can send and receive willowbucks by using the :willowbuck: reaction on
another user's message!

You can use the following commands at any time:
/willowbuck-balance      - check your current :willowbuck: balance
/willowbuck-top-balances - see the top :willowbuck: earners"""


def credit_message(
    from_name: str, to_name: str, channel_name: str, amount: int, first: bool
) -> str:
    where = f"in channel #{channel_name}"
    if first and amount == 1:
        return f"{from_name} sent {to_name} their first :willowbuck: {where}"
    if first:
        return f"{from_name} sent {to_name} their first {amount} :willowbuck: {where}"
    if amount == 1:
        return f"{from_name} sent a :willowbuck: to {to_name} {where}"
    return f"{from_name} sent {amount} :willowbuck: to {to_name} {where}"


def debit_message(from_name: str, to_name: str, channel_name: str) -> str:
    return f"{from_name} removed their :willowbuck: from {to_name} in #{channel_name}"
