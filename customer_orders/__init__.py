"""
Customer Orders - A Domain-Driven Design Sample

This package demonstrates the core DDD building blocks around one aggregate:
1. Value objects (Address, OrderItem) validated at construction
2. An entity (Order) owned exclusively by its aggregate
3. An aggregate root (CustomerAggregateRoot) enforcing the outstanding-orders limit
4. Domain events buffered by the aggregate and dispatched by the application layer
5. Repositories (in-memory and PostgreSQL) persisting the whole aggregate graph
"""

__version__ = "1.0.0"
