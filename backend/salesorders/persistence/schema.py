# =============================================================================
# SALES ORDERS v1.0 - DATABASE SCHEMA
# =============================================================================
# DDL shared by the Alembic baseline migration and init_database().
#
# Reference tables are owned by the CRUD side of the system; the orders core
# only reads their display fields.
# =============================================================================

REFERENCE_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS customers (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(50) NOT NULL UNIQUE,
        name VARCHAR(200) NOT NULL,
        address VARCHAR(200),
        city VARCHAR(100),
        state VARCHAR(50),
        zip_code VARCHAR(20),
        status INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(50) NOT NULL UNIQUE,
        customer_id INTEGER NOT NULL REFERENCES customers(id),
        account_type VARCHAR(20) NOT NULL,
        name VARCHAR(200) NOT NULL,
        address VARCHAR(200),
        city VARCHAR(100),
        state VARCHAR(50),
        zip_code VARCHAR(20),
        status INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS carriers (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(50) NOT NULL UNIQUE,
        name VARCHAR(200) NOT NULL,
        status INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS carrier_services (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(50) NOT NULL UNIQUE,
        carrier_id INTEGER NOT NULL REFERENCES carriers(id),
        name VARCHAR(200) NOT NULL,
        description TEXT,
        status INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS warehouses (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(50) NOT NULL UNIQUE,
        name VARCHAR(200) NOT NULL,
        city VARCHAR(100),
        state VARCHAR(50),
        status INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS materials (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(50) NOT NULL UNIQUE,
        code VARCHAR(50) NOT NULL UNIQUE,
        description TEXT,
        uom VARCHAR(20),
        status INTEGER NOT NULL DEFAULT 1
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_types (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(50) NOT NULL UNIQUE,
        name VARCHAR(100) NOT NULL
    )
    """,
)

ORDER_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS orders (
        id SERIAL PRIMARY KEY,
        lookup_code VARCHAR(20) NOT NULL UNIQUE,
        order_number VARCHAR(20) NOT NULL,
        status INTEGER NOT NULL DEFAULT 10,
        order_type_id INTEGER NOT NULL,
        customer_id INTEGER NOT NULL,
        ship_to_account_id INTEGER NOT NULL,
        bill_to_account_id INTEGER NOT NULL,
        carrier_id INTEGER NOT NULL,
        carrier_service_id INTEGER NOT NULL,
        warehouse_id INTEGER,
        expected_delivery_date TIMESTAMP NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        created_by INTEGER,
        modified_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        modified_by INTEGER,
        CONSTRAINT orders_order_number_key UNIQUE (order_number),
        CONSTRAINT orders_status_check CHECK (status IN (10, 11, 12, 13))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_items (
        id SERIAL PRIMARY KEY,
        order_id INTEGER NOT NULL REFERENCES orders(id),
        material_id INTEGER NOT NULL,
        quantity INTEGER NOT NULL,
        status INTEGER NOT NULL DEFAULT 1,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        created_by INTEGER,
        modified_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        modified_by INTEGER,
        CONSTRAINT order_items_quantity_check CHECK (quantity > 0)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_number_counters (
        prefix VARCHAR(16) PRIMARY KEY,
        last_value INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS operation_log (
        id SERIAL PRIMARY KEY,
        operation_type VARCHAR(50) NOT NULL,
        entity VARCHAR(50),
        entity_id INTEGER,
        description TEXT,
        data_json TEXT,
        actor_id INTEGER,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
)

INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_orders_customer_created ON orders (customer_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_orders_created ON orders (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items (order_id)",
    "CREATE INDEX IF NOT EXISTS idx_order_items_material ON order_items (material_id)",
)

SCHEMA_STATEMENTS = REFERENCE_TABLES + ORDER_TABLES + INDEXES

# Drop order for downgrade (children first)
TABLE_NAMES = (
    'operation_log',
    'order_number_counters',
    'order_items',
    'orders',
    'order_types',
    'materials',
    'warehouses',
    'carrier_services',
    'carriers',
    'accounts',
    'customers',
)
