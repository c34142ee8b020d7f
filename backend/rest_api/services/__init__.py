"""
Services module for business logic.

- domain/: Application services (orders, tables, payments, finance)

Usage:
    from rest_api.services.domain import OrderService
    service = OrderService(db)
    result = service.create_order(restaurant_id, draft, lines)
"""
