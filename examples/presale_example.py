"""
Example: Running a presale from initialization to finalization.

The system wallet issues the sale inventory into a custodial vault owned by
the sale id. Two buyers then purchase in the private and public stages, one
with the native currency and one with a stable token, and the admin releases
the unsold tokens once the sale has ended.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from presale import (
    Ledger, Move, PresaleProgram, PaymentType, build_transaction, derive_sale_id,
    native_currency, stable_token, sale_token, SYSTEM_WALLET, USDC_MINT,
)


def main():
    print("=" * 80)
    print("PRESALE - Private and Public Sale Example")
    print("=" * 80)
    print()

    ledger = Ledger("demo", initial_time=datetime(2025, 1, 1), verbose=False)

    ledger.register_unit(native_currency("SOL", "Solana"))
    ledger.register_unit(stable_token(USDC_MINT, "USD Coin"))
    ledger.register_unit(sale_token("NLOV", "Neurolov", issuer="admin"))

    sale_id = derive_sale_id("admin")
    for wallet in ("admin", "merchant", "liquidity", "alice", "bob"):
        ledger.register_wallet(wallet)
    ledger.register_wallet("presale_vault", authority=sale_id)

    print("Example 1: Inventory and buyer funding")
    print("-" * 80)
    ledger.execute(build_transaction(ledger, [
        Move(Decimal(1_000_000), "NLOV", SYSTEM_WALLET, "presale_vault", "inventory_issuance"),
        Move(Decimal(50_000_000), "SOL", SYSTEM_WALLET, "alice", "airdrop_alice"),
        Move(Decimal(5_000), USDC_MINT, SYSTEM_WALLET, "bob", "airdrop_bob"),
    ]))
    print(f"Vault NLOV: {ledger.get_balance('presale_vault', 'NLOV'):,}")
    print(f"Alice SOL: {ledger.get_balance('alice', 'SOL'):,}")
    print(f"Bob USDC: {ledger.get_balance('bob', USDC_MINT):,}")
    print()

    print("Example 2: Initialize and open the private sale")
    print("-" * 80)
    program = PresaleProgram(ledger)
    program.initialize("admin", 10, 50, 7, 14, 600_000, "NLOV", "presale_vault", "merchant")
    program.set_stage("admin", sale_id)
    info = program.get_sale_info(sale_id)
    print(f"Stage: {info.stage.name}, private sale ends {info.private_end}")
    print()

    print("Example 3: Purchases")
    print("-" * 80)
    bought = program.buy_tokens("alice", sale_id, PaymentType.WEB3, 10_000_000)
    print(f"Alice bought {bought:,} NLOV for 10,000,000 lamports")

    ledger.advance_time(ledger.current_time + timedelta(days=7))
    program.set_stage("admin", sale_id)
    bought = program.buy_tokens_by_stable_coin("bob", sale_id, PaymentType.WEB3, 1_000, USDC_MINT)
    print(f"Bob bought {bought:,} NLOV for 1,000 USDC")
    print(f"Tokens left before hardcap: {program.check_presale_token_balance(sale_id):,}")
    print()

    print("Example 4: End and finalize")
    print("-" * 80)
    ledger.advance_time(ledger.current_time + timedelta(days=14))
    program.set_stage("admin", sale_id)
    released = program.finalize_presale("admin", sale_id, "liquidity")
    print(f"Released {released:,} unsold NLOV to liquidity")
    print()

    for wallet in ("alice", "bob", "merchant", "liquidity", "presale_vault"):
        print(f"{wallet:>14}: {ledger.get_wallet_balances(wallet)}")
    print()
    print(f"Double entry valid: {ledger.verify_double_entry()['valid']}")


if __name__ == "__main__":
    main()
