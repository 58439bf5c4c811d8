"""Logistics bounded context — courier shipment lifecycle, SLA and billing handoff.

Covers on-board-courier (OBC) and next-flight-out (NFO) shipments from quote
through invoicing: the status state machine, deadline classification, the
document completeness gate, the completion workflow that signals billing, and
commission calculation for payable tasks.
"""
