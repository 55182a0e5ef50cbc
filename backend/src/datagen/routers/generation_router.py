from fastapi import APIRouter

from datagen.controllers import download_controller, generation_controller
from datagen.models.schemas.generation import GenerateDataResponse

router = APIRouter()

router.add_api_route(
    "/generate",
    generation_controller.generate_data,
    methods=["POST"],
    response_model=GenerateDataResponse,
    tags=["Data Generation"],
    summary="Generate Mock or Real Data",
)

router.add_api_route(
    "/download",
    download_controller.download_data,
    methods=["POST"],
    tags=["Data Generation"],
    summary="Download Generated Data",
)

router.add_api_route(
    "/templates",
    generation_controller.list_templates,
    methods=["GET"],
    tags=["Data Generation"],
    summary="List Mock Data Templates",
)
