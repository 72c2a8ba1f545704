"""
Banner Carousel

Two independent timers drive the home-page carousel:
    - rotation: advances to the next slide every ``rotation_seconds``,
      only when there is more than one slide; any manual navigation
      restarts the wait
    - countdown: every tick recomputes the time left for slides that
      carry an ``end_time``

The carousel takes an explicit ``now`` so it can be driven by a real
clock or by tests.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from foodzy.schemas import CarouselResponse, CarouselSlide
from foodzy.services.gateway import BaseDataGateway

logger = logging.getLogger(__name__)

OFFER_EXPIRED = "Offer Expired"

PLACEHOLDER_BANNER = CarouselSlide(
    id="placeholder",
    title="Welcome to FoodZy",
    image_url=(
        "https://images.unsplash.com/photo-1504674900247-0877df9cc836"
        "?ixlib=rb-4.0.3&auto=format&fit=crop&w=1200&q=80"
    ),
    link_url="/menu",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def time_left(end_time: datetime, now: Optional[datetime] = None) -> str:
    """``{d}d {h}h {m}m {s}s`` until ``end_time``, or ``Offer Expired``."""
    remaining = int((_aware(end_time) - _aware(now or utcnow())).total_seconds() * 1000)
    if remaining <= 0:
        return OFFER_EXPIRED

    days = remaining // (1000 * 60 * 60 * 24)
    hours = (remaining // (1000 * 60 * 60)) % 24
    minutes = (remaining // (1000 * 60)) % 60
    seconds = (remaining // 1000) % 60
    return f"{days}d {hours}h {minutes}m {seconds}s"


class BannerCarousel:
    """
    Carousel state for one viewer.

    Example:
        >>> carousel = BannerCarousel(slides, now=start)
        >>> carousel.tick(start + timedelta(seconds=5))
        >>> carousel.index
        1
    """

    def __init__(
        self,
        slides: Sequence[CarouselSlide],
        rotation_seconds: float = 5.0,
        now: Optional[datetime] = None,
    ):
        self.slides = list(slides) or [PLACEHOLDER_BANNER]
        self.rotation_seconds = rotation_seconds
        self.index = 0
        self._last_change = now or utcnow()

    @property
    def current(self) -> CarouselSlide:
        return self.slides[self.index]

    @property
    def rotates(self) -> bool:
        return len(self.slides) > 1

    def go_to(self, index: int, now: Optional[datetime] = None) -> int:
        self.index = index % len(self.slides)
        self._last_change = now or utcnow()
        return self.index

    def next(self, now: Optional[datetime] = None) -> int:
        return self.go_to(self.index + 1, now)

    def previous(self, now: Optional[datetime] = None) -> int:
        return self.go_to(self.index - 1, now)

    def tick(self, now: Optional[datetime] = None) -> bool:
        """Advance when the rotation interval has elapsed; True if it moved."""
        now = now or utcnow()
        if not self.rotates:
            return False
        if (now - self._last_change).total_seconds() >= self.rotation_seconds:
            self.next(now)
            return True
        return False

    def countdowns(self, now: Optional[datetime] = None) -> dict[str, str]:
        """Time left per slide id, only for slides with an end time."""
        now = now or utcnow()
        return {
            slide.id: time_left(slide.end_time, now)
            for slide in self.slides
            if slide.end_time is not None
        }

    def snapshot(self, now: Optional[datetime] = None) -> CarouselResponse:
        countdowns = self.countdowns(now)
        return CarouselResponse(
            index=self.index,
            rotation_seconds=self.rotation_seconds,
            slides=[
                slide.model_copy(update={"time_left": countdowns.get(slide.id)})
                for slide in self.slides
            ],
        )


async def load_slides(gateway: BaseDataGateway) -> list[CarouselSlide]:
    """Active banners in display order."""
    rows = await gateway.select(
        "banners", eq={"is_active": True}, order_by="display_order"
    )
    logger.debug(f"Loaded {len(rows)} active banners")
    return [CarouselSlide.model_validate(row) for row in rows]


async def load_carousel(
    gateway: BaseDataGateway,
    rotation_seconds: float = 5.0,
    now: Optional[datetime] = None,
) -> BannerCarousel:
    return BannerCarousel(await load_slides(gateway), rotation_seconds, now)
