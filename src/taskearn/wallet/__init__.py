"""
Local earnings ledger: balances, task rewards and withdrawal requests.
"""
