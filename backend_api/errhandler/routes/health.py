from flask_smorest import Blueprint

from errhandler.handler import fallible
from errhandler.schemas import HealthSchema

blp = Blueprint("Health", "health", url_prefix="/health", description="Health check route")


@fallible
def health_check(response, request):
    """
    PUBLIC_INTERFACE
    Simple health-check endpoint to verify the API is running.
    """
    response.set_data(HealthSchema().dumps({"message": "Healthy"}))


blp.add_url_rule("", view_func=health_check.as_view("health_check"), methods=["GET"])
