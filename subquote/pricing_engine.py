"""
Quote Engine: turns a JobInput into a PriceDetails breakdown.

Pure math, no I/O. Safe to call on every keystroke.

Order of operations (both services):
1. base price from duration and language / variant
2. add-on fees and discounts, each computed from the base price and summed
3. subtotal = base + fees - discount
4. urgency surcharge = subtotal x tier percentage, folded into additional_fees
5. total = base + additional_fees - discount

No rounding happens here; round at presentation time.
"""

import math

from . import rates
from .models import ServiceType, Urgency
from .schemas import JobInput, PriceDetails


class PricingEngine:
    """Stateless quote calculator for subtitle and transcription jobs."""

    def compute_quote(self, job: JobInput) -> PriceDetails:
        if job.service_type == ServiceType.TRANSCRIPTION:
            return self._price_transcription(job)
        return self._price_subtitle(job)

    # --- Subtitle ---

    def _price_subtitle(self, job: JobInput) -> PriceDetails:
        duration = job.duration_minutes
        base_price = self._subtitle_base(job)

        additional_fees = 0.0
        for add_on, pct in rates.SUBTITLE_ADD_ON_FEES.items():
            if getattr(job.add_ons, add_on):
                additional_fees += base_price * pct
        additional_fees += self._difficulty_fee(job, base_price)

        discount = 0.0
        for min_minutes, pct in rates.SUBTITLE_DURATION_DISCOUNTS:
            if duration >= min_minutes:
                discount = base_price * pct
                break
        if job.add_ons.dual_subs:
            discount += base_price * rates.DUAL_SUBS_DISCOUNT
        discount += self._custom_discount(job, base_price)

        additional_fees += self._urgency_surcharge(job.urgency, base_price, additional_fees, discount)

        return PriceDetails(
            base_price=base_price,
            additional_fees=additional_fees,
            discount=discount,
            total=base_price + additional_fees - discount,
            estimated_days=self.estimated_days(job),
        )

    def _subtitle_base(self, job: JobInput) -> float:
        """Flat rate covers the first 4 minutes; every minute after is per-minute."""
        duration = job.duration_minutes
        if duration <= 0:
            return 0.0
        tier = rates.SUBTITLE_RATES[job.language]
        if duration <= rates.SUBTITLE_FLAT_MINUTES:
            return tier["flat_rate"]
        return tier["flat_rate"] + (duration - rates.SUBTITLE_FLAT_MINUTES) * tier["per_minute"]

    # --- Transcription ---

    def _price_transcription(self, job: JobInput) -> PriceDetails:
        duration = job.duration_minutes
        base_price = duration * rates.TRANSCRIPTION_RATES[job.variant]

        additional_fees = 0.0
        if job.add_ons.unclear_audio_per_minute:
            additional_fees += duration * rates.UNCLEAR_AUDIO_PER_MINUTE
        if job.add_ons.timestamp:
            additional_fees += base_price * rates.TIMESTAMP_FEE
        additional_fees += self._difficulty_fee(job, base_price)

        discount = 0.0
        if job.variant in rates.VOLUME_DISCOUNT_VARIANTS:
            hours = duration / 60
            for min_hours, pct in rates.TRANSCRIPTION_HOUR_DISCOUNTS:
                if hours >= min_hours:
                    discount = base_price * pct
                    break
        discount += self._custom_discount(job, base_price)

        additional_fees += self._urgency_surcharge(job.urgency, base_price, additional_fees, discount)

        return PriceDetails(
            base_price=base_price,
            additional_fees=additional_fees,
            discount=discount,
            total=base_price + additional_fees - discount,
            estimated_days=self.estimated_days(job),
        )

    # --- Shared rules ---

    def _difficulty_fee(self, job: JobInput, base_price: float) -> float:
        if not job.add_ons.difficulty_level:
            return 0.0
        return base_price * (job.difficulty_percent / 100)

    def _custom_discount(self, job: JobInput, base_price: float) -> float:
        if job.custom_discount_percent > 0:
            return base_price * (job.custom_discount_percent / 100)
        return 0.0

    def _urgency_surcharge(self, urgency: Urgency, base_price: float,
                           additional_fees: float, discount: float) -> float:
        """Exactly one tier applies, as a percentage of the pre-urgency subtotal."""
        pct = rates.URGENCY_SURCHARGES[urgency]
        if not pct:
            return 0.0
        subtotal = base_price + additional_fees - discount
        return subtotal * pct

    def throughput_for(self, job: JobInput) -> int:
        """Minutes of material finished per day for this job's language/category and urgency."""
        if job.service_type == ServiceType.TRANSCRIPTION:
            return rates.TRANSCRIPTION_THROUGHPUT[job.urgency]
        return rates.SUBTITLE_THROUGHPUT[job.language][job.urgency]

    def estimated_days(self, job: JobInput) -> int:
        return math.ceil(job.duration_minutes / self.throughput_for(job))

    def priority_label(self, urgency: Urgency) -> str:
        return rates.PRIORITY_LABELS[urgency]


_default_engine = PricingEngine()


def compute_quote(job: JobInput) -> PriceDetails:
    """Module-level shortcut around a shared PricingEngine."""
    return _default_engine.compute_quote(job)


def display_breakdown(price: PriceDetails, currency: str = "฿") -> dict:
    """Presentation rounding (2 dp) plus formatted strings."""
    rounded = {
        "base_price": round(price.base_price, 2),
        "additional_fees": round(price.additional_fees, 2),
        "discount": round(price.discount, 2),
        "total": round(price.total, 2),
    }
    formatted = {f"{k}_text": f"{currency}{v:,.2f}" for k, v in rounded.items()}
    return {**rounded, **formatted, "estimated_days": price.estimated_days}
