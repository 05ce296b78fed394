"""Pipeline stages: producer -> dispatcher -> consumer."""

from admissionsim.entities.consumer import Consumer
from admissionsim.entities.dispatcher import Dispatcher, admission_limit
from admissionsim.entities.producer import Producer
from admissionsim.entities.request import Request

__all__ = [
    "Consumer",
    "Dispatcher",
    "Producer",
    "Request",
    "admission_limit",
]
