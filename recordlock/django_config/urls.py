# File: recordlock/django_config/urls.py
"""
文件说明: 路由总入口 (Root URL Configuration)
"""
from django.contrib import admin
from django.urls import path

urlpatterns = [
    path('admin/', admin.site.urls),
]
