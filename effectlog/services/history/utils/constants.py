"""History constants and SQL fragments."""

# Separator between the two halves of a pair cursor ("<operation id>-<order>")
DEFAULT_PAIR_SEP = '-'

# Page sizes for effect listings
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 200

# Lookups used to resolve filter arguments to internal ids
QUERIES = {
    'account_by_address': """SELECT id FROM history_accounts
                             WHERE address = $1
                             """,
    'ledger_by_sequence': """SELECT id FROM history_ledgers
                             WHERE sequence = $1
                             """,
    'transaction_by_hash': """SELECT id FROM history_transactions
                              WHERE transaction_hash = $1
                                 OR inner_transaction_hash = $1
                              """,
    'liquidity_pool_by_id': """SELECT id FROM history_liquidity_pools
                               WHERE liquidity_pool_id = $1
                               """,
}
