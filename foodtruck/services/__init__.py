"""
                        Services Module

Business logic behind the HTTP routes.

Services:
    - orders: the order operations and id assignment
    - storage: order store backends (memory, Vercel KV, Redis, SQL)
"""
