"""Services offered by the shop and accepted payment methods.

Prices are whole pesos. A price of 0 means "ask in the shop": such services are
bookable but do not count towards the deposit.
"""
from pydantic import BaseModel


class ServiceItem(BaseModel):
    id: int
    name: str
    price: int
    duration: int  # minutes


SERVICES: list[ServiceItem] = [
    ServiceItem(id=1, name="Corte", price=15500, duration=15),
    ServiceItem(id=2, name="Barba", price=7000, duration=10),
    ServiceItem(id=3, name="Corte + Barba", price=18500, duration=25),
    ServiceItem(id=4, name="Global / Color (Consultar)", price=0, duration=90),
    ServiceItem(id=5, name="Nutrición capilar (Consultar)", price=0, duration=60),
    ServiceItem(id=6, name="Pomada (compra)", price=10000, duration=0),
]

PAYMENT_METHODS: list[str] = ["Transferencia Bancaria"]

_BY_ID = {s.id: s for s in SERVICES}


def get_services() -> list[ServiceItem]:
    return list(SERVICES)


def get_service(service_id: int) -> ServiceItem | None:
    return _BY_ID.get(service_id)


def resolve_services(service_ids: list[int]) -> list[ServiceItem] | None:
    """Look up each id; None if any is unknown."""
    items = [get_service(i) for i in service_ids]
    if any(item is None for item in items):
        return None
    return items
