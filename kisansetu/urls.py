"""
URL configuration for the KisanSetu project.

All API routes live under ``/api/``; the websocket route is registered in
``websocket_chat.routing``.
"""
from django.contrib import admin
from django.urls import path, include
from . import views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('ping/', views.PingView.as_view(), name='ping'),
    path('api/auth/', include('users.urls')),
    path('api/listings/', include('listings.urls')),
    path('api/messages/', include('dmessages.urls')),
]
