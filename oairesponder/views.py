from django.http import HttpResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from django.views.generic.base import View

from oairesponder.conf import get_provider


@method_decorator(csrf_exempt, name='dispatch')
class OAIPMHView(View):
    def get(self, request):
        return self.oai_response(request.GET)

    def post(self, request):
        return self.oai_response(request.POST)

    def oai_response(self, querydict):
        provider = get_provider()
        oai_response = provider.handle_request(dict(querydict.lists()))
        return HttpResponse(
            oai_response.content,
            status=oai_response.status,
            content_type=oai_response.content_type,
        )
