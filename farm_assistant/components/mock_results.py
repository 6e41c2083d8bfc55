# farm_assistant/components/mock_results.py
"""Fixed identification results served when no Gemini key is configured."""

MOCK_RESULTS = [
    {
        "name": "Fall Armyworm (Spodoptera frugiperda)",
        "confidence": 92,
        "type": "pest",
        "description": "A destructive caterpillar pest that feeds on crops.",
        "causes": [
            "Migration of adult moths",
            "Warm temperatures and high humidity",
            "Absence of natural predators",
        ],
        "control_measures": {
            "chemical": [
                {
                    "name": "Duduthrin",
                    "active_ingredient": "Deltamethrin 25 g/L EC",
                    "application_rate": "1 ml/L water",
                    "method_points": [
                        "Apply as a foliar spray, ensuring thorough coverage of the maize plants, especially the whorl",
                        "Repeat after 7-10 days if infestation persists",
                    ],
                    "safe_days": 14,
                    "safety_points": [
                        "Wear nitrile gloves, N95 mask, and goggles during application",
                        "Avoid contact with skin and eyes",
                        "Keep children and animals away from treated areas until the spray has dried",
                    ],
                    "brands": ["Duduthrin", "Tata Alpha"],
                },
                {
                    "name": "Belt Expert",
                    "active_ingredient": "Flubendiamide 480 g/L SC",
                    "application_rate": "0.3 ml/L water",
                    "method_points": [
                        "Apply as a foliar spray, targeting the early larval stages",
                        "Ensure good coverage of the plant, particularly the whorl and stem",
                        "Repeat after 10-14 days if necessary",
                    ],
                    "safe_days": 21,
                    "safety_points": [
                        "Wear nitrile gloves, a long-sleeved shirt, long pants, and eye protection",
                        "Avoid inhaling the spray mist",
                        "Wash thoroughly with soap and water after handling",
                    ],
                    "brands": ["Belt Expert", "Fame"],
                },
            ],
            "organic": [
                {
                    "name": "Neem Oil",
                    "active_ingredient": "Azadirachtin",
                    "application_rate": "5 ml/L water",
                    "method_points": [
                        "Apply as a foliar spray, ensuring thorough coverage, especially the whorl",
                        "Repeat every 5-7 days",
                    ],
                    "safe_days": 0,
                    "safety_points": [
                        "Wear gloves and eye protection",
                        "Avoid spraying during hot, sunny conditions",
                    ],
                },
            ],
            "cultural": [
                "Plant early to avoid peak pest populations",
                "Use trap crops like napier grass around maize fields",
                "Regularly scout fields for egg masses and young larvae",
                "Practice crop rotation with non-host crops",
                "Maintain field sanitation by removing crop residues after harvest",
            ],
        },
        "plants_affected": ["Maize", "Sorghum", "Rice", "Sugarcane", "Millet", "Cotton", "Vegetables"],
    },
    {
        "name": "Tomato Leaf Miner (Tuta absoluta)",
        "confidence": 88,
        "type": "pest",
        "description": "A devastating pest that mines leaves, stems, and fruits of tomato plants.",
        "causes": [
            "Introduction through infested seedlings",
            "Warm climate conditions",
            "Poor crop rotation practices",
        ],
        "control_measures": {
            "chemical": [
                {
                    "name": "Coragen",
                    "active_ingredient": "Chlorantraniliprole 200 g/L SC",
                    "application_rate": "0.5 ml/L water",
                    "method_points": [
                        "Apply as a foliar spray ensuring complete coverage",
                        "Target application when larvae are young",
                        "Repeat application after 14 days if necessary",
                    ],
                    "safe_days": 3,
                    "safety_points": [
                        "Wear protective clothing during application",
                        "Avoid contact with skin, eyes, and clothing",
                        "Do not apply when bees are actively foraging",
                    ],
                    "brands": ["Coragen", "Prevathon"],
                },
                {
                    "name": "Voliam Targo",
                    "active_ingredient": "Chlorantraniliprole 45g/L + Abamectin 18g/L EC",
                    "application_rate": "0.8 ml/L water",
                    "method_points": [
                        "Apply as a foliar spray ensuring thorough coverage",
                        "Apply at first sign of infestation",
                        "Repeat after 10-14 days if necessary",
                    ],
                    "safe_days": 7,
                    "safety_points": [
                        "Wear protective equipment during application",
                        "Highly toxic to aquatic organisms and bees",
                        "Do not spray during flowering",
                    ],
                    "brands": ["Voliam Targo", "Virtako"],
                },
            ],
            "organic": [
                {
                    "name": "Bacillus thuringiensis (Bt)",
                    "active_ingredient": "Bacillus thuringiensis kurstaki",
                    "application_rate": "2-3 g/L water",
                    "method_points": [
                        "Apply as a foliar spray in the evening",
                        "Ensure thorough coverage of all plant surfaces",
                        "Repeat application every 7 days",
                    ],
                    "safe_days": 0,
                    "safety_points": [
                        "Safe for humans and beneficial insects",
                        "Can be applied up to day of harvest",
                    ],
                },
            ],
            "cultural": [
                "Use pheromone traps to monitor and mass trap adults",
                "Remove and destroy infested leaves and fruits",
                "Use insect-proof nets in nurseries and greenhouses",
                "Practice crop rotation with non-solanaceous crops",
                "Maintain field sanitation",
            ],
        },
        "plants_affected": ["Tomato", "Potato", "Eggplant", "Pepper", "Other solanaceous crops"],
    },
    {
        "name": "Late Blight (Phytophthora infestans)",
        "confidence": 95,
        "type": "disease",
        "description": "A devastating fungal disease that affects leaves, stems, and fruits of plants.",
        "causes": [
            "Fungal pathogen (Phytophthora infestans)",
            "Cool, wet weather conditions",
            "Poor air circulation",
            "Overhead irrigation",
        ],
        "control_measures": {
            "chemical": [
                {
                    "name": "Ridomil Gold",
                    "active_ingredient": "Metalaxyl-M + Mancozeb 68% WP",
                    "application_rate": "2.5 g/L water",
                    "method_points": [
                        "Apply as a preventive spray before disease onset",
                        "Ensure thorough coverage of all plant surfaces",
                        "Repeat application every 7-14 days depending on disease pressure",
                    ],
                    "safe_days": 7,
                    "safety_points": [
                        "Wear protective clothing during application",
                        "Avoid contact with skin and eyes",
                        "Do not apply in windy conditions",
                    ],
                    "brands": ["Ridomil Gold", "Victory"],
                },
                {
                    "name": "Revus",
                    "active_ingredient": "Mandipropamid 250 g/L SC",
                    "application_rate": "0.6 ml/L water",
                    "method_points": [
                        "Apply as a preventive treatment",
                        "Ensure complete coverage of the plant",
                        "Repeat every 7-10 days",
                    ],
                    "safe_days": 3,
                    "safety_points": [
                        "Wear protective equipment during mixing and application",
                        "Keep out of reach of children",
                        "Do not contaminate water sources",
                    ],
                    "brands": ["Revus", "Revus Top"],
                },
            ],
            "organic": [
                {
                    "name": "Copper Hydroxide",
                    "active_ingredient": "Copper Hydroxide 77% WP",
                    "application_rate": "2-3 g/L water",
                    "method_points": [
                        "Apply as a preventive spray",
                        "Ensure thorough coverage of all plant surfaces",
                        "Repeat application every 7 days",
                    ],
                    "safe_days": 1,
                    "safety_points": [
                        "Wear protective equipment during application",
                        "May cause leaf burn in hot weather",
                        "Can build up in soil with repeated use",
                    ],
                },
            ],
            "cultural": [
                "Plant resistant varieties when available",
                "Provide adequate spacing between plants for good air circulation",
                "Avoid overhead irrigation",
                "Remove and destroy infected plant material",
                "Practice crop rotation with non-solanaceous crops",
            ],
        },
        "plants_affected": ["Potato", "Tomato", "Eggplant", "Other solanaceous crops"],
    },
]
