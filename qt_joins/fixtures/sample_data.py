"""Built-in hand-authored supermarket fixture.

Rows are tuples in the column order of the matching TableSpec. Dates and
times are ISO strings; DuckDB casts them on insert.

Deliberately unreferenced rows:
- customer 6 (Farah Haddad) never purchased anything
- cashier 4 (Jonas Berg) never rang up a transaction
- product 8 (Sparkling water) was never sold
"""

from decimal import Decimal

CUSTOMERS = [
    (1, "Alice", "Nguyen", "555-0101", "1985-03-14"),
    (2, "Bruno", "Silva", "555-0102", "1990-07-02"),
    (3, "Chloe", "Martin", "555-0103", "1978-11-23"),
    (4, "Dmitri", "Ivanov", "555-0104", "2001-01-30"),
    (5, "Emma", "Okafor", "555-0105", "1995-05-09"),
    (6, "Farah", "Haddad", "555-0106", "1988-09-17"),
]

CASHIERS = [
    (1, "Grace Lee"),
    (2, "Hassan Ali"),
    (3, "Ines Costa"),
    (4, "Jonas Berg"),
]

PRODUCTS = [
    (1, "Whole milk 1L", "Dairyland", "Dairy", Decimal("1.29")),
    (2, "Greek yogurt 500g", "Dairyland", "Dairy", Decimal("2.49")),
    (3, "Sourdough loaf", "Baker Street", "Bakery", Decimal("3.75")),
    (4, "Croissant 4-pack", "Baker Street", "Bakery", Decimal("4.20")),
    (5, "Bananas 1kg", "FreshFields", "Produce", Decimal("1.99")),
    (6, "Cheddar 200g", "Dairyland", "Dairy", Decimal("3.10")),
    (7, "Orange juice 1L", "FreshFields", "Beverages", Decimal("2.95")),
    (8, "Sparkling water 6x1L", "ClearSpring", "Beverages", Decimal("4.50")),
]

# (purchase_id, transaction_id, customer_id, cashier_id, product_id, quantity,
#  purchase_date, purchase_time, payment_method, store_location,
#  discount_percent, is_discounted)
CART = [
    (1, 1001, 1, 1, 1, 2, "2024-03-01", "09:15:00", "card", "Downtown", Decimal("0"), False),
    (2, 1001, 1, 1, 3, 1, "2024-03-01", "09:15:00", "card", "Downtown", Decimal("0"), False),
    (3, 1001, 1, 1, 5, 1, "2024-03-01", "09:15:00", "card", "Downtown", Decimal("10"), True),
    (4, 1002, 2, 2, 2, 3, "2024-03-01", "10:42:00", "cash", "Riverside", Decimal("0"), False),
    (5, 1002, 2, 2, 7, 2, "2024-03-01", "10:42:00", "cash", "Riverside", Decimal("0"), False),
    (6, 1003, 3, 1, 4, 1, "2024-03-02", "14:05:00", "card", "Downtown", Decimal("15"), True),
    (7, 1003, 3, 1, 6, 2, "2024-03-02", "14:05:00", "card", "Downtown", Decimal("0"), False),
    (8, 1003, 3, 1, 1, 1, "2024-03-02", "14:05:00", "card", "Downtown", Decimal("0"), False),
    (9, 1004, 1, 3, 7, 1, "2024-03-03", "18:30:00", "mobile", "Riverside", Decimal("0"), False),
    (10, 1005, 4, 2, 5, 4, "2024-03-04", "11:11:00", "cash", "Downtown", Decimal("0"), False),
    (11, 1005, 4, 2, 3, 2, "2024-03-04", "11:11:00", "cash", "Downtown", Decimal("5"), True),
    (12, 1006, 5, 3, 6, 1, "2024-03-05", "16:20:00", "card", "Airport", Decimal("0"), False),
    (13, 1006, 5, 3, 2, 2, "2024-03-05", "16:20:00", "card", "Airport", Decimal("20"), True),
    (14, 1006, 5, 3, 4, 2, "2024-03-05", "16:20:00", "card", "Airport", Decimal("0"), False),
    (15, 1007, 2, 1, 1, 6, "2024-03-06", "08:50:00", "mobile", "Downtown", Decimal("0"), False),
    (16, 1008, 3, 3, 7, 3, "2024-03-07", "19:45:00", "cash", "Airport", Decimal("10"), True),
    (17, 1008, 3, 3, 5, 2, "2024-03-07", "19:45:00", "cash", "Airport", Decimal("0"), False),
    (18, 1009, 5, 2, 3, 1, "2024-03-08", "12:00:00", "card", "Riverside", Decimal("0"), False),
]

SAMPLE_ROWS = {
    "customer": CUSTOMERS,
    "cashier": CASHIERS,
    "product": PRODUCTS,
    "cart": CART,
}
