"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.results import TransactionResult
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Staff accounts and their login sessions
CREATE TABLE IF NOT EXISTS users (
    id              UUID PRIMARY KEY,
    email           VARCHAR(255) UNIQUE NOT NULL,
    password_hash   VARCHAR(255) NOT NULL,
    full_name       VARCHAR(255) NOT NULL,
    phone           VARCHAR(50),
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS sessions (
    id              UUID PRIMARY KEY,
    user_id         UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    expires_at      TIMESTAMPTZ NOT NULL
);

CREATE TABLE IF NOT EXISTS password_resets (
    id              UUID PRIMARY KEY,
    user_id         UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    token           VARCHAR(255) UNIQUE NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    expires_at      TIMESTAMPTZ NOT NULL
);

-- Customer profiles
CREATE TABLE IF NOT EXISTS profiles (
    id              UUID PRIMARY KEY,
    full_name       VARCHAR(255) NOT NULL,
    phone           VARCHAR(50),
    email           VARCHAR(255),
    address         TEXT,
    notes           TEXT,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Menu
CREATE TABLE IF NOT EXISTS categories (
    id              UUID PRIMARY KEY,
    name            VARCHAR(255) NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS menu_items (
    id                  UUID PRIMARY KEY,
    name                VARCHAR(255) NOT NULL,
    description         TEXT,
    price               NUMERIC(10,2) NOT NULL,
    category_id         UUID REFERENCES categories(id) ON DELETE SET NULL,
    image_url           TEXT,
    is_available        BOOLEAN DEFAULT TRUE,
    item_type           VARCHAR(50) DEFAULT 'regular',
    send_to_kitchen     BOOLEAN DEFAULT TRUE,
    sizes               JSONB,
    crusts              JSONB,
    allow_half_and_half BOOLEAN DEFAULT FALSE,
    created_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Dining tables
CREATE TABLE IF NOT EXISTS tables (
    id              UUID PRIMARY KEY,
    name            VARCHAR(255) NOT NULL,
    capacity        INTEGER,
    location        VARCHAR(255),
    status          VARCHAR(50) DEFAULT 'available',
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Orders and their line items
CREATE TABLE IF NOT EXISTS orders (
    id                       UUID PRIMARY KEY,
    customer_name            VARCHAR(255),
    customer_id              UUID REFERENCES profiles(id) ON DELETE SET NULL,
    order_time               TIMESTAMPTZ DEFAULT NOW(),
    status                   VARCHAR(50) NOT NULL,
    total_amount             NUMERIC(10,2) NOT NULL,
    payment_status           VARCHAR(50) DEFAULT 'pending',
    order_type               VARCHAR(50) NOT NULL,
    table_id                 UUID REFERENCES tables(id) ON DELETE SET NULL,
    payment_method           VARCHAR(50),
    amount_paid              NUMERIC(10,2),
    paid_at                  TIMESTAMPTZ,
    notes                    TEXT,
    auto_progress            BOOLEAN DEFAULT TRUE,
    current_progress_percent INTEGER DEFAULT 0,
    updated_at               TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS order_items (
    id                  UUID PRIMARY KEY,
    order_id            UUID NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
    menu_item_id        UUID REFERENCES menu_items(id) ON DELETE SET NULL,
    quantity            INTEGER NOT NULL,
    name                VARCHAR(255) NOT NULL,
    price               NUMERIC(10,2) NOT NULL,
    selected_size_id    VARCHAR(255),
    selected_crust_id   VARCHAR(255),
    is_half_and_half    BOOLEAN DEFAULT FALSE,
    first_half_flavor   JSONB,
    second_half_flavor  JSONB,
    created_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Cash register
CREATE TABLE IF NOT EXISTS cash_register_sessions (
    id                       UUID PRIMARY KEY,
    opening_balance          NUMERIC(10,2) NOT NULL,
    closing_balance          NUMERIC(10,2),
    closing_balance_informed NUMERIC(10,2),
    opened_at                TIMESTAMPTZ NOT NULL,
    closed_at                TIMESTAMPTZ,
    status                   VARCHAR(50) NOT NULL,
    notes                    TEXT,
    difference               NUMERIC(10,2)
);

CREATE TABLE IF NOT EXISTS cash_adjustments (
    id              UUID PRIMARY KEY,
    session_id      UUID NOT NULL REFERENCES cash_register_sessions(id) ON DELETE CASCADE,
    type            VARCHAR(50) NOT NULL CHECK (type IN ('add', 'remove')),
    amount          NUMERIC(10,2) NOT NULL,
    reason          TEXT,
    adjusted_at     TIMESTAMPTZ NOT NULL
);

-- Application settings (single row)
CREATE TABLE IF NOT EXISTS app_settings (
    id              UUID PRIMARY KEY,
    store           JSONB NOT NULL,
    order_flow      JSONB NOT NULL,
    notifications   JSONB NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Indexes for faster lookups
CREATE INDEX IF NOT EXISTS idx_menu_items_category ON menu_items(category_id);
CREATE INDEX IF NOT EXISTS idx_orders_table ON orders(table_id);
CREATE INDEX IF NOT EXISTS idx_orders_customer ON orders(customer_id);
CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items(order_id);
CREATE INDEX IF NOT EXISTS idx_cash_sessions_status ON cash_register_sessions(status);

-- Columns added after the first release
ALTER TABLE orders ADD COLUMN IF NOT EXISTS paid_at TIMESTAMPTZ;
CREATE INDEX IF NOT EXISTS idx_orders_paid_at ON orders(paid_at);
"""

SETTINGS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS app_settings (
    id              UUID PRIMARY KEY,
    store           JSONB NOT NULL,
    order_flow      JSONB NOT NULL,
    notifications   JSONB NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);
"""

EXPECTED_TABLES = (
    "users",
    "sessions",
    "password_resets",
    "profiles",
    "categories",
    "menu_items",
    "tables",
    "orders",
    "order_items",
    "cash_register_sessions",
    "cash_adjustments",
    "app_settings",
)


def create_tables(db) -> TransactionResult:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        db: An open Database.
    """
    result = db.transaction(lambda tx: tx.query(SCHEMA_SQL))
    if result.ok:
        logger.info("Database schema initialized successfully.")
    else:
        logger.error(f"Failed to initialize schema: {result.error}")
    return result


if __name__ == "__main__":
    from db.connection import Database

    database = Database()
    database.open()
    try:
        outcome = create_tables(database)
    finally:
        database.close()
    raise SystemExit(0 if outcome.ok else 1)
