from shortie.utils.responses import response_200, response_503
from shortie.service import ShortenService
from shortie.types import HandlerEvent, HandlerResponse
from shortie.utils.helpers import guarantee_500_response


@guarantee_500_response
def health_handler(event: HandlerEvent, service: ShortenService) -> HandlerResponse:
    if service.health():
        return response_200({'status': 'ok'})
    return response_503(message='token store degraded')
