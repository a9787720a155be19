"""New review template — a product review awaiting moderation."""

from notifications.channel.channel import EventClass, MessageType
from notifications.templates.formatting import bold, escape, join_lines


class NewReviewTemplate:
    message_type = MessageType.NEW_REVIEW.value
    event_class = EventClass.REVIEWS

    @staticmethod
    def render(context: dict) -> str:
        rating = int(context.get("rating", 0))
        stars = "⭐" * max(0, min(rating, 5))
        return join_lines(
            f"⭐ {bold('New review!')}",
            "",
            f"🍫 Product: {escape(context.get('product_name', 'N/A'))}",
            f"👤 Reviewer: {escape(context.get('user_name', 'N/A'))}",
            f"Rating: {stars} ({rating}/5)",
            "",
            f"💬 {bold('Comment:')}",
            escape(context.get("comment", "")),
        )
