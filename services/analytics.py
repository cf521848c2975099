"""Analytics - folds a partner's events and offers into summary figures.

Everything is computed from stored rows at request time. Revenue is
`price * current_participants` and is always grouped by currency code;
amounts in different currencies are never added together.
"""

import calendar
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from models import Event, EventStatus, Offer
from services.errors import ValidationError
from services.lifecycle import EventBucket, classify, hours_until_start
from services.offers import OfferStatus, derive_status, discounted_price

PERIOD_MONTHS = {"1month": 1, "3months": 3, "6months": 6, "year": 12}
TREND_MONTHS = 6
TOP_EVENTS = 3

BUCKET_LABELS = {
    EventBucket.UPCOMING: "Upcoming",
    EventBucket.PAST: "Completed",
    EventBucket.DRAFT: "Draft",
    EventBucket.CANCELLED: "Cancelled",
}


def shift_months(moment: datetime, months: int) -> datetime:
    """Move by whole calendar months, clamping the day to the target month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def growth(current: float, previous: float) -> float:
    """Percentage change against the previous window."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


def currency_code(event: Event) -> str:
    return getattr(event.currency, "value", event.currency) or "INR"


def is_live(event: Event) -> bool:
    """Published and not cancelled - the events that count towards totals."""
    return event.status != EventStatus.CANCELLED and not event.draft_mode


def event_revenue(event: Event) -> int:
    return (event.price or 0) * event.current_participants


def revenue_by_currency(events: Iterable[Event]) -> Dict[str, int]:
    totals: Dict[str, int] = defaultdict(int)
    for event in events:
        if not is_live(event):
            continue
        amount = event_revenue(event)
        if amount:
            totals[currency_code(event)] += amount
    return dict(totals)


def _participants(events: Iterable[Event]) -> int:
    return sum(e.current_participants for e in events if is_live(e))


def _starting_between(events: Iterable[Event], start: datetime, end: datetime,
                      include_end: bool = True) -> List[Event]:
    if include_end:
        return [e for e in events if start <= e.start_date <= end]
    return [e for e in events if start <= e.start_date < end]


def _month_series(events: List[Event], now: datetime) -> Dict[str, List[Dict[str, Any]]]:
    participant_trends = []
    revenue_trends = []
    this_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    for offset in range(TREND_MONTHS - 1, -1, -1):
        month_start = shift_months(this_month, -offset)
        month_end = shift_months(month_start, 1)
        month_events = [
            e for e in _starting_between(events, month_start, month_end, include_end=False)
            if is_live(e)
        ]
        label = month_start.strftime("%b %Y")
        participant_trends.append({"month": label, "participants": _participants(month_events)})
        revenue_trends.append({"month": label, "revenue": revenue_by_currency(month_events)})

    return {"participantTrends": participant_trends, "revenueTrends": revenue_trends}


def summarize(events: List[Event], offers: List[Offer], now: datetime,
              period: str = "1month") -> Dict[str, Any]:
    """Dashboard analytics for the period ending now, compared with the period before it."""
    if period not in PERIOD_MONTHS:
        raise ValidationError(
            f"Invalid period '{period}'. Use one of: {', '.join(PERIOD_MONTHS)}",
            field="period",
        )

    months = PERIOD_MONTHS[period]
    window_start = shift_months(now, -months)
    previous_start = shift_months(now, -2 * months)

    current = _starting_between(events, window_start, now)
    previous = _starting_between(events, previous_start, window_start, include_end=False)
    live_current = [e for e in current if is_live(e)]

    completed = [e for e in live_current if e.end_date < now]
    completed_before = [e for e in previous if is_live(e) and e.end_date < now]

    participants = _participants(current)
    revenue = revenue_by_currency(current)
    previous_revenue = revenue_by_currency(previous)

    top = sorted(live_current, key=lambda e: e.current_participants, reverse=True)[:TOP_EVENTS]

    return {
        "period": period,
        "participants": {
            "total": participants,
            "growth": growth(participants, _participants(previous)),
        },
        "events": {
            "total": len(current),
            "upcoming": sum(1 for e in events if classify(e, now) == EventBucket.UPCOMING),
            "completed": len(completed),
            "cancelled": sum(1 for e in current if e.status == EventStatus.CANCELLED),
            "drafts": sum(1 for e in events if classify(e, now) == EventBucket.DRAFT),
            "growth": growth(len(completed), len(completed_before)),
        },
        "offers": {
            "active": sum(1 for o in offers if derive_status(o, now) == OfferStatus.ACTIVE),
            "expired": sum(1 for o in offers if derive_status(o, now) == OfferStatus.EXPIRED),
            "linkedEvents": sum(1 for e in events if e.offer_id is not None),
        },
        "revenue": {
            "byCurrency": revenue,
            "growth": {
                code: growth(revenue.get(code, 0), previous_revenue.get(code, 0))
                for code in sorted(set(revenue) | set(previous_revenue))
            },
        },
        "charts": dict(
            _month_series(events, now),
            eventAttendance=[
                {
                    "eventId": e.id,
                    "event": e.name,
                    "capacity": e.max_participants,
                    "attended": e.current_participants,
                }
                for e in sorted(live_current, key=lambda e: e.start_date)
            ],
        ),
        "topEvents": [
            {
                "id": e.id,
                "name": e.name,
                "date": e.start_date.strftime("%B %d, %Y"),
                "participants": e.current_participants,
                "attendanceRate": _fill_rate(e),
                "revenue": event_revenue(e),
                "currency": currency_code(e),
            }
            for e in top
        ],
    }


def _fill_rate(event: Event) -> float:
    if not event.max_participants:
        return 0.0
    return round(event.current_participants / event.max_participants * 100, 1)


def event_analytics(event: Event, offer: Optional[Offer], now: datetime) -> Dict[str, Any]:
    offer_info = None
    if offer is not None:
        offer_info = {
            "id": offer.id,
            "percentage": offer.percentage,
            "status": derive_status(offer, now).value,
            "discountedPrice": discounted_price(event.price or 0, offer.percentage),
        }

    return {
        "eventId": event.id,
        "bucket": classify(event, now).value,
        "capacity": event.max_participants,
        "participants": event.current_participants,
        "spotsRemaining": max(event.max_participants - event.current_participants, 0),
        "fillRate": _fill_rate(event),
        "hoursUntilStart": round(hours_until_start(event, now), 1),
        "revenue": {
            "currency": currency_code(event),
            "amount": event_revenue(event) if event.status != EventStatus.CANCELLED else 0,
        },
        "offer": offer_info,
    }


def dashboard_stats(events: List[Event], offers: List[Offer], now: datetime) -> Dict[str, int]:
    return {
        "totalEvents": len(events),
        "upcomingEvents": sum(1 for e in events if classify(e, now) == EventBucket.UPCOMING),
        "activeOffers": sum(1 for o in offers if derive_status(o, now) == OfferStatus.ACTIVE),
        "totalParticipants": _participants(events),
    }


def _relative_day(moment: datetime, now: datetime) -> str:
    days = (moment.date() - now.date()).days
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days == -1:
        return "yesterday"
    if days > 1:
        return f"in {days} days"
    return f"{-days} days ago"


def recent_activities(events: List[Event], offers: List[Offer], now: datetime,
                      limit: int = 5) -> List[Dict[str, Any]]:
    """Newest-first feed of the partner's events and offers."""
    items = []

    for event in events:
        bucket = classify(event, now)
        items.append((event.updated_at or event.created_at, {
            "id": event.id,
            "title": event.name,
            "status": BUCKET_LABELS[bucket],
            "type": "event",
            "link": f"/events/{event.id}",
            "primaryInfo": event.start_date.strftime("%B %d, %Y"),
            "secondaryInfo": f"{event.current_participants} participants",
            "timeInfo": _relative_day(event.start_date, now),
        }))

    for offer in offers:
        status = derive_status(offer, now)
        if offer.expiry_date is None:
            time_info = "No expiry"
        elif status == OfferStatus.ACTIVE:
            time_info = f"Expires {_relative_day(offer.expiry_date, now)}"
        else:
            time_info = f"Expired {_relative_day(offer.expiry_date, now)}"
        linked = sum(1 for e in events if e.offer_id == offer.id)
        items.append((offer.updated_at or offer.created_at, {
            "id": offer.id,
            "title": offer.text,
            "status": f"Offer {status.value}",
            "type": "offer",
            "link": f"/offers/{offer.id}",
            "primaryInfo": f"{offer.percentage}% discount",
            "secondaryInfo": f"{linked} linked events",
            "timeInfo": time_info,
        }))

    items.sort(key=lambda item: item[0] or datetime.min, reverse=True)
    return [item for _, item in items[:limit]]
