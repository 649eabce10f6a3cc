from django.urls import path

from oairesponder.views import OAIPMHView


urlpatterns = [
    path('oai-pmh/', OAIPMHView.as_view(), name='oai-pmh'),
]
