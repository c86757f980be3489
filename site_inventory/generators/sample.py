"""Sample bookings and sales for demo inventories."""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

from site_inventory import ledger
from site_inventory.generators.base import BaseGenerator
from site_inventory.models import FlatRecord, FlatStatus, FlatType, PaymentMode
from site_inventory.models.money import quantize


class SampleSalesGenerator(BaseGenerator):
    """Book or sell generated flats with plausible buyers and payments.

    Sold flats get a deal value of area x rate, one to four instalments
    covering part of it, and occasionally some extra work.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    sold_rate : float
        Share of flats marked Sold.
    booked_rate : float
        Share of flats marked Booked.
    """

    FLAT_TYPES = list(FlatType)
    FLAT_TYPE_WEIGHTS = [0.25, 0.45, 0.25, 0.05]

    # Carpet area range in sq. ft.
    AREA_RANGES = {
        FlatType.ONE_BHK: (450, 650),
        FlatType.TWO_BHK: (750, 1100),
        FlatType.THREE_BHK: (1200, 1600),
        FlatType.PENTHOUSE: (2200, 3200),
    }

    RATE_RANGE = (4500, 9000)  # per sq. ft.

    EXTRA_WORK = [
        "Modular kitchen",
        "False ceiling",
        "Extra power points",
        "Wooden flooring",
        "Balcony grill",
        "Bathroom tiling upgrade",
    ]

    def __init__(
        self,
        seed: int | None = None,
        sold_rate: float = 0.3,
        booked_rate: float = 0.2,
    ) -> None:
        super().__init__(seed)
        self.sold_rate = sold_rate
        self.booked_rate = booked_rate

    def populate(self, flat: FlatRecord) -> FlatRecord:
        """Return a copy of ``flat`` with a type, size, price and maybe a buyer."""
        flat_type = self.random.choices(self.FLAT_TYPES, weights=self.FLAT_TYPE_WEIGHTS, k=1)[0]
        low, high = self.AREA_RANGES[flat_type]
        area = Decimal(self.random.randint(low, high))
        rate = Decimal(self.random.randrange(*self.RATE_RANGE, 50))
        flat = replace(flat, flat_type=flat_type, area=area, rate=rate)

        roll = self.random.random()
        if roll < self.sold_rate:
            return self._sell(flat)
        if roll < self.sold_rate + self.booked_rate:
            return self._book(flat)
        return flat

    def _book(self, flat: FlatRecord) -> FlatRecord:
        return replace(
            flat,
            status=FlatStatus.BOOKED,
            buyer_name=self.fake.name(),
            buyer_mobile=self.fake.phone_number(),
        )

    def _sell(self, flat: FlatRecord) -> FlatRecord:
        flat = replace(
            self._book(flat),
            status=FlatStatus.SOLD,
            buyer_address=self.fake.address().replace("\n", ", "),
            total_amount=quantize(flat.area * flat.rate),
        )

        # Instalments cover 20-100% of the deal value
        paid_share = Decimal(str(round(self.random.uniform(0.2, 1.0), 2)))
        remaining = quantize(flat.total_amount * paid_share)
        num_payments = self.random.randint(1, 4)
        paid_on = self.fake.date_between(start_date="-2y", end_date="-60d")
        for i in range(num_payments):
            if i == num_payments - 1:
                amount = remaining
            else:
                amount = quantize(remaining * Decimal(str(round(self.random.uniform(0.2, 0.6), 2))))
            if amount <= 0:
                break
            remaining -= amount
            flat = ledger.append_payment(
                flat,
                amount,
                paid_on,
                mode=self.random.choice(list(PaymentMode)),
            )
            paid_on = min(paid_on + timedelta(days=self.random.randint(15, 90)), date.today())

        for description in self.random.sample(self.EXTRA_WORK, k=self.random.randint(0, 2)):
            cost = Decimal(self.random.randrange(10000, 150000, 500))
            flat = ledger.append_extra_work(flat, description, cost)
        return flat
