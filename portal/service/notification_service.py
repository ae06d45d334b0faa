"""
주문 완료 메일 발송

완료 처리된 주문 목록을 HTML 표로 만들어 SMTP로 보낸다.
결과는 {"success": True} 또는 {"error": "..."}: 예외를 밖으로 던지지 않음
(메일 실패가 이미 저장된 주문을 되돌리면 안 됨)
"""
import smtplib
from datetime import datetime
from email.header import Header
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape

from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.logger import get_logger
from models.order import Order

logger = get_logger("notification")

_CELL = 'style="padding: 8px; border: 1px solid #ddd;"'


def _format_date(value: str | None, with_time: bool = False) -> str:
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return escape(value)
    return parsed.strftime("%Y-%m-%d %H:%M" if with_time else "%Y-%m-%d")


def render_order_html(order: Order) -> str:
    rows = "".join(
        f"<tr>"
        f"<td {_CELL}>{escape(item.name)}</td>"
        f'<td {_CELL} align="center">{item.quantity}</td>'
        f"<td {_CELL}>{_format_date(item.regist_date)}</td>"
        f"<td {_CELL}>{escape(item.note or '-')}</td>"
        f"</tr>"
        for item in order.items
    )
    return (
        '<div style="margin-bottom: 30px; border: 1px solid #eee; padding: 15px;">'
        f"<h3>주문 ID: {escape(order.id)}</h3>"
        f"<p><strong>주문자:</strong> {escape(order.customer_name)} ({escape(order.company_name or '')})</p>"
        f"<p><strong>주문일:</strong> {_format_date(order.date, with_time=True)}</p>"
        + (f"<p><strong>주문 메모:</strong> {escape(order.note)}</p>" if order.note else "")
        + '<table style="width: 100%; border-collapse: collapse;">'
        "<thead><tr>"
        f"<th {_CELL}>제품명</th><th {_CELL}>수량</th><th {_CELL}>등록일</th><th {_CELL}>제품 메모</th>"
        "</tr></thead>"
        f"<tbody>{rows}</tbody></table></div>"
    )


def render_completion_email(orders: list[Order]) -> str:
    body = "".join(render_order_html(order) for order in orders)
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>완료 처리된 주문 내역</h2>"
        "<p>다음 주문이 완료 처리되었습니다:</p>"
        f"{body}"
        f"<p>이 이메일은 {escape(settings.email_sender_name)}에서 자동 발송되었습니다.</p>"
        "</div>"
    )


def _send_mail(recipient: str, subject: str, html_body: str) -> None:
    """동기 SMTP 발송: 스레드풀에서 실행"""
    msg = MIMEText(html_body, "html", "utf-8")
    msg["Subject"] = Header(subject, "utf-8")
    msg["From"] = formataddr((settings.email_sender_name, settings.smtp_user))
    msg["To"] = recipient

    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
        if settings.smtp_starttls:
            smtp.starttls()
        if settings.smtp_user:
            smtp.login(settings.smtp_user, settings.smtp_password)
        smtp.sendmail(settings.smtp_user, [recipient], msg.as_string())


async def send_order_completion_email(orders: list[Order], recipient: str | None = None) -> dict:
    recipient = recipient or settings.default_order_email
    if not recipient:
        return {"error": "수신자 이메일 주소가 설정되지 않았습니다."}
    if not settings.smtp_host:
        return {"error": "메일 서버(SMTP)가 설정되지 않았습니다."}
    if not orders:
        return {"error": "발송할 주문이 없습니다."}

    subject = f"[{settings.email_sender_name}] 완료 처리된 주문 내역 ({datetime.now().strftime('%Y-%m-%d')})"
    try:
        await run_in_threadpool(_send_mail, recipient, subject, render_completion_email(orders))
    except (smtplib.SMTPException, OSError) as e:
        logger.warning("메일 발송 실패", extra={"extra_data": {
            "recipient": recipient, "order_ids": [o.id for o in orders], "error": str(e),
        }})
        return {"error": f"이메일 발송 중 오류가 발생했습니다: {e}"}

    logger.info("메일 발송 성공", extra={"extra_data": {
        "recipient": recipient, "order_ids": [o.id for o in orders],
    }})
    return {"success": True}
