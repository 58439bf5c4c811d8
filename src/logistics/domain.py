"""Logistics bounded context — courier shipments from quote to invoice.

Covers on-board-courier (OBC) and next-flight-out (NFO) freight. Uses CQRS:
shipments and commissions are plain aggregates persisted after every
command, and the billing system is reached through a port once a shipment
completes.
"""

from protean.domain import Domain

logistics = Domain(name="logistics")
