# gallery/utils/tg_service.py
import logging
from typing import Dict, Optional, Union

from telegram import Bot, Message
from telegram.error import TelegramError

from gallery.core.config import settings

logger = logging.getLogger(__name__)


class TelegramService:
    """Service for pushing admin notifications through a Telegram bot"""

    def __init__(self, bot_token: str):
        """
        Initialize Telegram service with bot token

        Args:
            bot_token: Telegram bot token from @BotFather
        """
        self.bot = Bot(token=bot_token)

    async def send_message(
        self,
        chat_id: Union[int, str],
        text: str,
        parse_mode: Optional[str] = None,
        disable_web_page_preview: bool = True,
    ) -> Optional[Message]:
        """
        Send a message to a chat. Returns None when Telegram rejects it.
        """
        try:
            message = await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=parse_mode,
                disable_web_page_preview=disable_web_page_preview,
            )

            logger.info(f"Message sent successfully to chat {chat_id}")
            return message

        except TelegramError as e:
            logger.error(f"Failed to send message to chat {chat_id}: {e}")
            return None


def format_order_notification(order_data: Dict, customer_email: str) -> str:
    lines = [
        f"🛍️ New order #{order_data['order_number']}",
        f"Customer: {customer_email}",
        f"Total: ${order_data['total_amount']:,.2f}",
        f"Items: {len(order_data.get('items', []))}",
    ]
    for item in order_data.get("items", []):
        lines.append(f"  • {item['title']} x{item['quantity']}")
    return "\n".join(lines)


async def notify_admin_new_order(order_data: Dict, customer_email: str) -> bool:
    """Best-effort admin ping for a confirmed order."""
    if not (
        settings.telegram_notification_enabled
        and settings.telegram_bot_token
        and settings.telegram_admin_chat_id
    ):
        logger.debug("Telegram admin notifications disabled")
        return False

    service = TelegramService(settings.telegram_bot_token)
    message = await service.send_message(
        settings.telegram_admin_chat_id,
        format_order_notification(order_data, customer_email),
    )
    return message is not None
