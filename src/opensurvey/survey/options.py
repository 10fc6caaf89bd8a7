"""Published answer options for the product-career survey.

Submissions are validated against these lists; the survey form renders
them as single- and multi-choice questions.
"""

ROLE_OPTIONS: tuple[str, ...] = (
    "Product Manager",
    "Product Owner",
    "Product Designer / UX/UI Designer (UXer)",
    "Product Engineer / Software Engineer (Developer)",
    "Data Analyst / Product Analyst",
    "Product Marketing Manager",
    "Engineering Manager / Tech Lead",
    "Design Manager / Design Lead",
    "QA Engineer / Test Engineer",
    "DevOps Engineer / Platform Engineer",
    "Technical Writer / Documentation",
    "Customer Success Manager",
    "Sales Engineer / Solutions Engineer",
    "Other",
)

SENIORITY_OPTIONS: tuple[str, ...] = (
    "Junior (0-2 years)",
    "Mid-level (2-5 years)",
    "Senior (5-8 years)",
    "Staff/Principal (8+ years)",
    "Manager/Lead",
    "Director/VP",
    "C-level/Founder",
)

COMPANY_TYPE_OPTIONS: tuple[str, ...] = (
    "Startup (1-50 employees)",
    "Scale-up (51-200 employees)",
    "Mid-size company (201-1000 employees)",
    "Large enterprise (1000+ employees)",
    "Freelance/Independent",
    "Agency/Consultancy",
    "Other",
)

COMPANY_SIZE_OPTIONS: tuple[str, ...] = (
    "Early-stage Startup (Pre-seed/Seed)",
    "Growth-stage Startup (Series A-C)",
    "Scale-up (Series D+)",
    "SME (Small/Medium Enterprise)",
    "Large Corporate (1000+ employees)",
    "Enterprise (10,000+ employees)",
    "Consultancy/Agency",
    "Freelance/Independent",
)

INDUSTRY_OPTIONS: tuple[str, ...] = (
    "Technology/Software",
    "Financial Services/Fintech",
    "Healthcare/Medtech",
    "E-commerce/Retail",
    "Education/Edtech",
    "Media/Entertainment",
    "Manufacturing/Industrial",
    "Consulting/Professional Services",
    "Government/Public Sector",
    "Non-profit/NGO",
    "Other",
)

PRODUCT_TYPE_OPTIONS: tuple[str, ...] = (
    "SaaS (B2B)",
    "SaaS (B2C)",
    "Mobile App",
    "Web Application",
    "E-commerce Platform",
    "API/Developer Tools",
    "Hardware + Software",
    "Services/Consulting",
    "Internal Tools",
    "Other",
)

CUSTOMER_SEGMENT_OPTIONS: tuple[str, ...] = (
    "B2B Product",
    "B2C Product",
    "B2B2C Product",
    "Internal Product",
    "Mixed (B2B + B2C)",
)

SALARY_CURRENCIES: tuple[str, ...] = ("ARS", "USD")
