# File Path: recordlock/django_config/settings.py
"""
文件说明: 开发 / 测试用 Django 配置
加载 .env (DJANGO_SECRET_KEY, DJANGO_DEBUG, DJANGO_DB_NAME)，挂载 lockable 与测试 App。
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# 加载 .env 环境变量
load_dotenv()

# -----------------------------------------------------------------------------
# 1. 路径与核心
# -----------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-recordlock-dev-key')
DEBUG = os.environ.get('DJANGO_DEBUG', 'true').lower() == 'true'
ALLOWED_HOSTS = ['*']

# -----------------------------------------------------------------------------
# 2. 应用注册 (Installed Apps)
# -----------------------------------------------------------------------------
INSTALLED_APPS = [
    # --- Django Native ---
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # --- Third Party ---
    'rest_framework',

    # --- Record Lock ---
    'recordlock.apps.lockable',
    'recordlock.tests',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'recordlock.django_config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# -----------------------------------------------------------------------------
# 3. 数据库配置
# -----------------------------------------------------------------------------
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('DJANGO_DB_NAME', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'UTC'
STATIC_URL = 'static/'

# -----------------------------------------------------------------------------
# 4. DRF API 配置
# -----------------------------------------------------------------------------
REST_FRAMEWORK = {
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'EXCEPTION_HANDLER': 'recordlock.apps.lockable.contrib.rest_framework.exception_handler',
}

# -----------------------------------------------------------------------------
# 5. 记录锁定配置
# -----------------------------------------------------------------------------
LOCKABLE = {
    'LOG_DENIALS': True,
    'DENIED_HTTP_STATUS': 423,
    'ADMIN_ACTIONS': True,
}

# -----------------------------------------------------------------------------
# 6. 日志
# -----------------------------------------------------------------------------
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '[{levelname}] {name}: {message}', 'style': '{'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'loggers': {
        'recordlock': {
            'handlers': ['console'],
            'level': os.environ.get('RECORDLOCK_LOG_LEVEL', 'WARNING'),
        },
    },
}
