"""Alert text for each severity band, per location."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from models.locations import TEL_AVIV
from models.records import Location
from services.severity import SeverityBand, classify


@dataclass(frozen=True)
class AlertTemplates:
    """``str.format`` templates receiving ``index`` (float) and ``stamp`` (int)."""

    low: str
    moderate: str
    high: str

    def for_band(self, band: SeverityBand) -> str:
        return getattr(self, band.value)


TEL_AVIV_ALERTS = AlertTemplates(
    low="The UV index in Tel-Aviv is {index:.1f}. It's safe to go outside! \U0001F60E\n"
    "#uvindex #telaviv #uvbot_{stamp}",
    moderate="The UV Index in Tel-Aviv is {index:.1f}. Seek shade and lather up on that sun screen! \U0001F31E\n"
    "#uvindex #telaviv #uvbot_{stamp}",
    high="Hot dang! The UV Index in Tel-Aviv is {index:.1f}. Stay indoors! \U0001F525\n"
    "#uvindex #telaviv #uvbot_{stamp}",
)

ALERTS_BY_LOCATION: Dict[str, AlertTemplates] = {
    TEL_AVIV.display_name: TEL_AVIV_ALERTS,
}


def _hashtag(location: Location) -> str:
    return "#" + "".join(ch for ch in location.display_name.lower() if ch.isalnum())


def generic_alerts(location: Location) -> AlertTemplates:
    """Fallback templates for locations without hand-written copy."""
    name = location.display_name
    footer = f"\n#uvindex {_hashtag(location)} #uvbot_{{stamp}}"
    return AlertTemplates(
        low=f"The UV index in {name} is {{index:.1f}}. Low risk." + footer,
        moderate=f"The UV index in {name} is {{index:.1f}}. Moderate risk, use sun screen." + footer,
        high=f"The UV index in {name} is {{index:.1f}}. High risk, avoid the sun." + footer,
    )


def render_alert(
    location: Location,
    uv_index: float,
    clock: Callable[[], float] = time.time,
    templates: Optional[AlertTemplates] = None,
) -> str:
    chosen = templates or ALERTS_BY_LOCATION.get(location.display_name) or generic_alerts(location)
    template = chosen.for_band(classify(uv_index))
    return template.format(index=uv_index, stamp=int(clock()))
