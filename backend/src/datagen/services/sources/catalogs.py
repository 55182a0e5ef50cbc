"""
Adapters backed by fixed reference tables rather than a live API.
They never fail, so they always yield min(rows, table size) rows.
"""
from typing import List

from datagen.models.schemas.generation import GenerationResult, Row
from datagen.services.sources.base import SourceAdapter

# (mode, average speed km/h, passenger capacity, fuel use l/100km)
TRANSPORT_MODES = [
    ("Bus", 25, 50, 4.5),
    ("Train", 80, 300, 2.8),
    ("Subway", 35, 200, 3.2),
    ("Bicycle", 15, 1, 0),
    ("Car", 50, 5, 8.5),
    ("Motorcycle", 45, 2, 4.2),
    ("Tram", 20, 150, 3.8),
    ("Ferry", 30, 400, 15.2),
]

ML_DATASETS: List[Row] = [
    {"name": "Iris Dataset", "description": "Flower classification with 4 features", "type": "Classification", "samples": 150, "features": 4, "target": "Species (setosa, versicolor, virginica)", "use_case": "Beginner ML, Classification", "format": "CSV", "size_mb": 0.01, "url": "https://archive.ics.uci.edu/ml/datasets/iris"},
    {"name": "Boston Housing", "description": "Housing prices in Boston suburbs", "type": "Regression", "samples": 506, "features": 13, "target": "Median home value", "use_case": "Regression, Real Estate Analysis", "format": "CSV", "size_mb": 0.05, "url": "https://www.cs.toronto.edu/~delve/data/boston/bostonDetail.html"},
    {"name": "Wine Quality", "description": "Wine quality from physicochemical properties", "type": "Classification/Regression", "samples": 6497, "features": 11, "target": "Quality score (0-10)", "use_case": "Quality Prediction, Feature Engineering", "format": "CSV", "size_mb": 0.3, "url": "https://archive.ics.uci.edu/ml/datasets/wine+quality"},
    {"name": "Titanic Dataset", "description": "Passenger survival on the Titanic", "type": "Binary Classification", "samples": 891, "features": 11, "target": "Survived (0/1)", "use_case": "Binary Classification, Feature Engineering", "format": "CSV", "size_mb": 0.06, "url": "https://www.kaggle.com/c/titanic"},
    {"name": "California Housing", "description": "Housing prices in California districts", "type": "Regression", "samples": 20640, "features": 8, "target": "Median house value", "use_case": "Regression, Geospatial Analysis", "format": "CSV", "size_mb": 1.2, "url": "https://www.dcc.fc.up.pt/~ltorgo/Regression/cal_housing.html"},
    {"name": "Diabetes Dataset", "description": "Diabetes progression prediction", "type": "Regression", "samples": 442, "features": 10, "target": "Disease progression", "use_case": "Healthcare ML, Regression", "format": "CSV", "size_mb": 0.03, "url": "https://www4.stat.ncsu.edu/~boos/var.select/diabetes.html"},
    {"name": "Heart Disease UCI", "description": "Heart disease prediction", "type": "Binary Classification", "samples": 303, "features": 13, "target": "Heart disease presence", "use_case": "Medical ML, Binary Classification", "format": "CSV", "size_mb": 0.02, "url": "https://archive.ics.uci.edu/ml/datasets/heart+disease"},
    {"name": "Breast Cancer Wisconsin", "description": "Diagnosis from cell nuclei features", "type": "Binary Classification", "samples": 569, "features": 30, "target": "Malignant/Benign", "use_case": "Medical Diagnosis, Binary Classification", "format": "CSV", "size_mb": 0.12, "url": "https://archive.ics.uci.edu/ml/datasets/Breast+Cancer+Wisconsin+(Diagnostic)"},
]

CV_DATASETS: List[Row] = [
    {"name": "MNIST", "description": "Handwritten digits (0-9)", "type": "Image Classification", "samples": 70000, "classes": 10, "image_size": "28x28 grayscale", "use_case": "Digit Recognition, CNN Training", "format": "IDX/PNG", "size_mb": 11.5, "url": "http://yann.lecun.com/exdb/mnist/"},
    {"name": "CIFAR-10", "description": "10 classes of natural images", "type": "Image Classification", "samples": 60000, "classes": 10, "image_size": "32x32 RGB", "use_case": "Object Recognition, CNN Training", "format": "Binary/PNG", "size_mb": 163, "url": "https://www.cs.toronto.edu/~kriz/cifar.html"},
    {"name": "Fashion-MNIST", "description": "Fashion item classification", "type": "Image Classification", "samples": 70000, "classes": 10, "image_size": "28x28 grayscale", "use_case": "Fashion Classification, CNN Training", "format": "IDX/PNG", "size_mb": 30, "url": "https://github.com/zalandoresearch/fashion-mnist"},
    {"name": "COCO Dataset", "description": "Common Objects in Context", "type": "Object Detection/Segmentation", "samples": 330000, "classes": 80, "image_size": "Variable", "use_case": "Object Detection, Instance Segmentation", "format": "JSON/JPEG", "size_mb": 25000, "url": "https://cocodataset.org/"},
    {"name": "ImageNet", "description": "Large-scale image classification", "type": "Image Classification", "samples": 14000000, "classes": 1000, "image_size": "Variable (224x224 typical)", "use_case": "Large-scale Classification, Transfer Learning", "format": "JPEG", "size_mb": 150000, "url": "https://www.image-net.org/"},
]

NLP_DATASETS: List[Row] = [
    {"name": "IMDB Movie Reviews", "description": "Movie review sentiment", "type": "Sentiment Analysis", "samples": 50000, "classes": 2, "language": "English", "use_case": "Sentiment Analysis, Text Classification", "format": "Text/CSV", "size_mb": 84, "url": "https://ai.stanford.edu/~amaas/data/sentiment/"},
    {"name": "Reuters-21578", "description": "News categorization", "type": "Text Classification", "samples": 21578, "classes": 90, "language": "English", "use_case": "News Classification, Multi-class Text Classification", "format": "SGML/Text", "size_mb": 27, "url": "https://archive.ics.uci.edu/ml/datasets/Reuters-21578+Text+Categorization+Collection"},
    {"name": "AG News", "description": "News article classification", "type": "Text Classification", "samples": 127600, "classes": 4, "language": "English", "use_case": "News Classification, Text Classification", "format": "CSV", "size_mb": 31, "url": "https://www.di.unipi.it/~gulli/AG_corpus_of_news_articles.html"},
    {"name": "20 Newsgroups", "description": "Newsgroup post classification", "type": "Text Classification", "samples": 20000, "classes": 20, "language": "English", "use_case": "Topic Classification, Document Classification", "format": "Text", "size_mb": 20, "url": "http://qwone.com/~jason/20Newsgroups/"},
    {"name": "CoNLL-2003 NER", "description": "Named entity recognition", "type": "Named Entity Recognition", "samples": 22137, "classes": 9, "language": "English", "use_case": "Named Entity Recognition, Sequence Labeling", "format": "CoNLL", "size_mb": 4.6, "url": "https://www.clips.uantwerpen.be/conll2003/ner/"},
    {"name": "SQuAD 2.0", "description": "Reading comprehension", "type": "Question Answering", "samples": 150000, "classes": "N/A", "language": "English", "use_case": "Question Answering, Reading Comprehension", "format": "JSON", "size_mb": 46, "url": "https://rajpurkar.github.io/SQuAD-explorer/"},
]


def _environmental_impact(fuel_use: float) -> str:
    if fuel_use == 0:
        return "Zero Emission"
    return "Low" if fuel_use < 5 else "Medium"


class TransportationAdapter(SourceAdapter):
    source_name = "Transportation Statistics Database"
    topic = "transportation"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        data = [
            {
                "transport_mode": mode,
                "average_speed_kmh": speed,
                "passenger_capacity": capacity,
                "fuel_consumption_l_per_100km": fuel_use,
                "environmental_impact": _environmental_impact(fuel_use),
                "cost_efficiency": round(capacity / fuel_use, 2) if fuel_use else "N/A",
            }
            for mode, speed, capacity, fuel_use in TRANSPORT_MODES[:rows]
        ]
        return self._result(data, rows)


class CatalogAdapter(SourceAdapter):
    catalog: List[Row] = []

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        return self._result([dict(entry) for entry in self.catalog], rows)


class MLDatasetsAdapter(CatalogAdapter):
    source_name = "ML Dataset Repository (UCI, Kaggle, GitHub)"
    topic = "ML dataset"
    catalog = ML_DATASETS


class ComputerVisionAdapter(CatalogAdapter):
    source_name = "Computer Vision Dataset Repository"
    topic = "computer vision"
    catalog = CV_DATASETS


class NLPDatasetsAdapter(CatalogAdapter):
    source_name = "NLP Dataset Repository"
    topic = "NLP dataset"
    catalog = NLP_DATASETS
