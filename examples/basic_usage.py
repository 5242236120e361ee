#!/usr/bin/env python3
"""
Example: Everyday ledger operations

Creates a bank, opens accounts for two customers, moves money around and
runs the monthly batch jobs.
"""

import os
import sys
from decimal import Decimal

# Add the package to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from retail_bank.bank import Bank
from retail_bank.config import get_config
from retail_bank.exceptions import BankingError
from retail_bank.logging_config import setup_logging


def main():
    config = get_config()
    setup_logging(config.log_level, config.log_format)

    bank = Bank("Modern Bank", config=config)
    print(f"Welcome to {bank.name}!")

    # 1. Customers
    print("\n1. Creating users")
    john = bank.create_user("John Doe", "john@example.com", "555-123-4567")
    jane = bank.create_user("Jane Smith", "jane@example.com", "555-765-4321")
    print(f"   {john.name}: {john.id}")
    print(f"   {jane.name}: {jane.id}")

    # 2. Accounts
    print("\n2. Opening accounts")
    johns_checking = bank.create_checking_account(john.id, 1000, 200)
    johns_savings = bank.create_savings_account(john.id, 5000, Decimal('1.25'))
    janes_checking = bank.create_checking_account(jane.id, 2500)
    for account in (johns_checking, johns_savings, janes_checking):
        print(f"   {account.product_type.value} {account.id}: ${account.balance}")

    # 3. Transactions
    print("\n3. Transactions")
    deposit = johns_checking.deposit(500)
    print(f"   Deposited ${deposit.amount}, checking balance ${johns_checking.balance}")

    withdrawal = johns_savings.withdraw(1000)
    print(f"   Withdrew ${withdrawal.amount}, savings balance ${johns_savings.balance}")

    transfer = bank.transfer_money(johns_savings.id, janes_checking.id, 1500)
    print(f"   Transferred ${transfer.amount} to {jane.name}")
    print(f"   {john.name} savings: ${johns_savings.balance}")
    print(f"   {jane.name} checking: ${janes_checking.balance}")

    # 4. Monthly jobs
    print("\n4. Monthly jobs")
    for transaction in bank.apply_interest_to_all_savings_accounts():
        print(f"   Interest ${transaction.amount:.2f} to {transaction.to_account_id}")
    for transaction in bank.apply_monthly_fees_to_all_checking_accounts():
        print(f"   Fee ${transaction.amount} from {transaction.from_account_id}")
    bank.reset_all_savings_account_withdrawal_limits()

    # 5. Reports
    print("\n5. Account information")
    for account in bank.get_user_accounts(john.id):
        print(f"   {account.get_account_info()}")
        for transaction in account.get_transaction_history():
            print(f"     {transaction.get_details()}")

    # 6. Errors
    print("\n6. Error handling")
    try:
        johns_checking.withdraw(10000)
    except BankingError as e:
        print(f"   Expected error: {e}")


if __name__ == "__main__":
    main()
