"""Seed a development project with a hospital, sample foods and AYUSH policies."""
from ayurdiet.core.firebase import init_firebase
from ayurdiet.services import firestore_store as store
from ayurdiet.services import food_service, policy_service, user_service

HOSPITAL = {
    "name": "Ayurveda Wellness Center",
    "address": "789 Harmony Blvd, Wellness City",
    "phone": "+1-555-0789",
    "email": "admin@ayurvedacenter.com",
    "adminId": "hospital-admin-uid-1",
}

FOODS = [
    {
        "name": "Basmati Rice",
        "category": "Grain",
        "nutritionalData": {"calories": 130, "protein": 2.7, "carbohydrates": 28, "fat": 0.3},
        "ayurvedicProperties": {
            "rasa": ["Sweet"], "virya": "Cold", "guna": ["Light", "Soft"], "vipaka": "Sweet",
            "doshaEffect": ["Tridoshic"], "digestibility": "Easy",
        },
        "doshaSuitability": {"Vata": True, "Pitta": True, "Kapha": True},
    },
    {
        "name": "Moong Dal",
        "category": "Grain",
        "nutritionalData": {"calories": 105, "protein": 7, "carbohydrates": 19, "fat": 0.4},
        "ayurvedicProperties": {
            "rasa": ["Sweet", "Astringent"], "virya": "Cold", "guna": ["Light", "Dry"], "vipaka": "Sweet",
            "doshaEffect": ["Tridoshic"], "digestibility": "Easy",
        },
        "doshaSuitability": {"Vata": True, "Pitta": True, "Kapha": True},
    },
    {
        "name": "Ghee",
        "category": "Dairy",
        "nutritionalData": {"calories": 112, "protein": 0, "carbohydrates": 0, "fat": 12.7},
        "ayurvedicProperties": {
            "rasa": ["Sweet"], "virya": "Cold", "guna": ["Heavy", "Oily"], "vipaka": "Sweet",
            "doshaEffect": ["Vata-pacifying", "Pitta-pacifying", "Kapha-aggravating"], "digestibility": "Moderate",
        },
        "doshaSuitability": {"Vata": True, "Pitta": True, "Kapha": False},
    },
    {
        "name": "Ginger",
        "category": "Spice",
        "nutritionalData": {"calories": 80, "protein": 1.8, "carbohydrates": 18, "fat": 0.8},
        "ayurvedicProperties": {
            "rasa": ["Pungent"], "virya": "Hot", "guna": ["Light", "Oily"], "vipaka": "Sweet",
            "doshaEffect": ["Vata-pacifying", "Kapha-pacifying", "Pitta-aggravating"], "digestibility": "Easy",
        },
        "doshaSuitability": {"Vata": True, "Pitta": False, "Kapha": True},
    },
]

POLICIES = [
    {
        "title": "Dinacharya dietary guidelines",
        "category": "dietary_guidelines",
        "source": "ministry_of_ayush",
        "summary": "Eat the main meal at midday when digestive fire is strongest.",
        "fullContent": "Lunch should be the largest meal; dinner light and taken before sunset.",
        "keyPrinciples": ["Largest meal at noon", "Light early dinner", "Warm freshly cooked food"],
        "targetAudience": ["dietitians", "patients"],
        "tags": ["meal timing", "agni"],
        "doshaRelevance": {"vata": True, "pitta": True, "kapha": True},
        "seasonalRelevance": ["spring", "summer", "monsoon", "autumn", "winter"],
        "isActive": True,
    },
    {
        "title": "Pitta pacifying summer diet",
        "category": "seasonal_recommendations",
        "source": "classical_texts",
        "summary": "Favour cooling, sweet and bitter foods during summer.",
        "fullContent": "Avoid pungent, sour and salty excess; prefer coconut water, rice and ghee.",
        "keyPrinciples": ["Cooling foods", "Avoid excess spice"],
        "applicableConditions": ["acidity", "skin rashes"],
        "targetAudience": ["dietitians"],
        "tags": ["summer", "pitta"],
        "doshaRelevance": {"pitta": True},
        "seasonalRelevance": ["summer"],
        "isActive": True,
    },
]


def seed():
    existing = store.get_all("hospitals", [("name", "==", HOSPITAL["name"])], limit=1)
    if existing:
        hospital = existing[0]
        print(f"Skipped hospital {HOSPITAL['name']} (Exists)")
    else:
        hospital = user_service.create_hospital(HOSPITAL)
        print(f"Added hospital {HOSPITAL['name']}")

    for food in FOODS:
        if food_service.search_by_name(food["name"]):
            print(f"Skipped {food['name']} (Exists)")
            continue
        food_service.create_food(food)
        print(f"Added {food['name']}")

    for policy in POLICIES:
        if policy_service.search(query=policy["title"]):
            print(f"Skipped policy {policy['title']} (Exists)")
            continue
        policy_service.create_policy(policy)
        print(f"Added policy {policy['title']}")

    return hospital


if __name__ == "__main__":
    init_firebase()
    seed()
