from typing import List, Optional

from datagen.models.categories import DataCategory

PROMPT_LEVELS = ("full", "truncated", "minimal")

# Field guidance for typed mock generation, keyed by template name
TYPED_TEMPLATES = {
    "business": "company name, industry, annual revenue, employee count, headquarters city, founding year, CEO name, stock symbol, growth rate and business model (B2B, B2C, SaaS)",
    "startup": "startup name, industry, latest funding round, valuation, lead investor, founder name, launch date, monthly burn rate, runway in months and product pitch",
    "personal": "full name, age, city, country, occupation, annual salary, education level, hobby, marital status and email",
    "celebrity": "stage name, real name, birth date, nationality, profession, net worth, social media followers, awards won and career highlight (all fictional)",
    "financial": "transaction id, account number, amount, currency, transaction type, merchant, category, timestamp, fee and fraud score",
    "investment": "ticker symbol, company name, share price, market cap, P/E ratio, dividend yield, 52-week high, 52-week low, volume, sector and analyst rating",
    "cryptocurrency": "coin name, symbol, price, market cap, 24h volume, blockchain network, consensus mechanism, total supply and circulating supply",
    "ecommerce": "product name, category, brand, price, discount, rating, review count, stock level, SKU and color",
    "marketplace": "seller name, store rating, listing title, shipping cost, delivery days, return policy, monthly sales and commission rate",
    "healthcare": "patient id, condition, treatment, medication, dosage, appointment date, doctor name, department and insurance provider (fictional only)",
    "pharmaceutical": "medication name, active ingredient, dosage, common side effect, manufacturer, approval date, patent expiry, therapeutic class and price",
    "education": "student name, student id, course, grade, GPA, professor, major, graduation year and scholarship",
    "university": "institution name, ranking, tuition, acceptance rate, student population, faculty count, research budget and campus city",
    "technology": "software name, version, programming language, framework, uptime percentage, monthly active users and license",
    "gaming": "game title, genre, platform, release date, rating, player count, revenue, studio and publisher",
    "marketing": "campaign name, channel, budget, impressions, clicks, conversions, CTR, CPC and ROAS",
    "social_media": "platform, username, follower count, engagement rate, post type, hashtag, likes, shares and comments",
    "transportation": "vehicle type, make, model, year, mileage, fuel efficiency, route, distance and travel time",
    "logistics": "shipment id, origin, destination, weight, dimensions, shipping method, tracking number, delivery date and carrier",
    "real_estate": "address, property type, square footage, bedrooms, bathrooms, price, lot size, year built and school district",
    "entertainment": "title, genre, release date, rating, box office revenue, streaming views, lead actor and production budget",
    "music": "song title, artist, album, genre, release date, stream count, chart position and record label",
    "sports": "team name, player name, position, league, season, matches played, goals or points, salary and transfer value",
    "fitness": "workout type, exercise, duration in minutes, calories burned, average heart rate, weight lifted and distance",
    "restaurant": "restaurant name, cuisine, signature dish, average price, rating, city, seating capacity and opening hours",
    "recipe": "dish name, main ingredients, prep time, cook time, difficulty, calories per serving, cuisine and cooking method",
    "travel": "destination, airline, flight number, price, departure date, duration, hotel name, hotel rating and activity",
    "scientific": "study title, lead researcher, institution, methodology, sample size, key result, publication date and citations",
    "weather": "location, temperature, humidity, wind speed, precipitation, pressure, UV index and air quality index",
    "government": "department name, annual budget, employee count, primary service, city, contact email and public program",
    "manufacturing": "product name, production volume, defect rate, machine model, efficiency rate, unit cost and supplier",
    "agriculture": "crop type, yield per hectare, planting date, harvest date, farm size, equipment, irrigation method and market price",
}

CLASSIFICATION_CATEGORIES = ", ".join(category.value for category in DataCategory)


def get_available_templates() -> List[str]:
    return list(TYPED_TEMPLATES.keys())


def is_valid_template(template: str) -> bool:
    return template.lower() in TYPED_TEMPLATES


def _field_instruction(fields: Optional[List[str]]) -> str:
    if not fields:
        return ""
    return (
        "\nUse exactly these field names, in this order, for every row: "
        + ", ".join(fields)
        + "."
    )


def create_mock_prompt(
    user_prompt: str,
    count: int,
    level: str = "full",
    template: Optional[str] = None,
    fields: Optional[List[str]] = None,
    truncate_at: int = 120,
) -> str:
    """
    Builds the mock-generation prompt at one of three simplification levels.

    - full: complete instructions, the whole user request and template guidance.
    - truncated: short instructions and the user request cut to `truncate_at` characters.
    - minimal: a one-line request naming only the subject.

    `fields` pins the field names once an earlier batch has established them.
    """
    if level not in PROMPT_LEVELS:
        raise ValueError(f"Unknown prompt level: {level}")

    if level == "minimal":
        subject = " ".join(user_prompt.split()[:6])
        return (
            f"Generate {count} rows of realistic sample data about: {subject}. "
            "Return the field names and one JSON object string per row."
            + _field_instruction(fields)
        )

    if level == "truncated":
        request = user_prompt[:truncate_at]
        return (
            f"Generate exactly {count} rows of realistic, fictional data for this request: "
            f'"{request}". Return the field names and one JSON object string per row.'
            + _field_instruction(fields)
        )

    guidance = ""
    if template:
        guidance = (
            f"\nDomain: {template}. Include fields such as {TYPED_TEMPLATES[template]}."
        )

    return (
        "You are a mock data generator. Create realistic but completely fictional "
        "records for the request below.\n"
        "Instructions:\n"
        "1. Choose clear, professional snake_case field names.\n"
        f"2. Generate exactly {count} rows. Every row has every field.\n"
        "3. Use proper types: numbers as numbers, booleans as true/false, dates as YYYY-MM-DD.\n"
        "4. Keep values diverse and internally consistent (e.g. salary matches job level).\n"
        "5. Return `fields` as the list of field names and `rows` as a list of strings, "
        "each string a JSON object for one row."
        f"{guidance}"
        f"{_field_instruction(fields)}\n\n"
        f'Request: "{user_prompt}"'
    )


def create_classification_prompt(user_prompt: str) -> str:
    return (
        "Analyze this data request and determine what category it falls into and "
        "what specific data should be fetched. "
        f"Pick the category from: {CLASSIFICATION_CATEGORIES}. "
        f'Request: "{user_prompt}"'
    )
