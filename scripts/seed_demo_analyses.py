"""
Seed demo saved analyses: a rental condo, a borrow-against-assets plan and
a credit card payoff plan.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fincalc.api.analyses import build_summary
from fincalc.db.database import get_db_context, init_db
from fincalc.db.models import AnalysisKind, SavedAnalysis

DEMO_ANALYSES = [
    {
        "kind": AnalysisKind.investment_property,
        "title": "San Juan Condo",
        "description": "2BR condo in Condado, long-term rental",
        "inputs": {
            "purchase_price": 250000,
            "renovation_cost": 15000,
            "closing_costs": 5000,
            "down_payment_percent": 20,
            "interest_rate": 6.5,
            "loan_term_years": 30,
            "monthly_rent": 2200,
            "property_tax_yearly": 800,
            "insurance_yearly": 1200,
            "hoa_monthly": 150,
            "maintenance_percent": 5,
            "vacancy_rate_percent": 5,
            "management_fee_percent": 10,
        },
    },
    {
        "kind": AnalysisKind.buyd,
        "title": "Portfolio line of credit",
        "description": "Live off a securities-backed loan for 30 years",
        "inputs": {
            "initial_asset_value": 350000,
            "growth_rate_percent": 6,
            "income_yield_percent": 2,
            "income_growth_rate_percent": 2,
            "interest_rate_percent": 6,
            "target_ltv_percent": 35,
            "lender_max_ltv_percent": 55,
            "borrow_mode": "maxSafe",
            "living_expenses_per_year": 12000,
            "cash_buffer_months": 12,
            "years": 30,
        },
    },
    {
        "kind": AnalysisKind.debt,
        "title": "Debt free by 2028",
        "description": None,
        "inputs": {
            "debts": [
                {"id": "visa", "name": "Visa", "balance": 6200, "apr": 24.99, "min_payment": 185},
                {"id": "store", "name": "Store Card", "balance": 900, "apr": 19.5, "min_payment": 35},
                {"id": "car", "name": "Car Loan", "balance": 14500, "apr": 6.9, "min_payment": 340},
            ],
            "extra_payment": 250,
            "strategy": "avalanche",
        },
    },
]


def seed_demo_analyses(db):
    """Add any demo analysis whose title is not saved yet. Returns the new rows."""
    created = []
    for demo in DEMO_ANALYSES:
        existing = db.query(SavedAnalysis).filter(SavedAnalysis.title == demo["title"]).first()
        if existing:
            print(f"Analysis '{demo['title']}' already exists. Skipping.")
            continue

        computed = build_summary(demo["kind"], demo["inputs"])
        analysis = SavedAnalysis(
            kind=demo["kind"],
            title=demo["title"],
            description=demo["description"],
            inputs=computed["inputs"],
            summary=computed["summary"],
        )
        db.add(analysis)
        created.append(analysis)

    db.flush()
    return created


def main():
    init_db()

    with get_db_context() as db:
        created = seed_demo_analyses(db)

        for analysis in created:
            print(f"\nCreated {analysis.kind.value} analysis: {analysis.title} (ID: {analysis.id})")
            for key, value in analysis.summary.items():
                print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
