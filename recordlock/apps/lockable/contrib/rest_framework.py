# File: recordlock/apps/lockable/contrib/rest_framework.py
"""
# ==============================================================================
# 模块名称: DRF 异常处理 (REST Framework Integration)
# ==============================================================================
#
# [Purpose / 用途]
# 将 RecordLocked 转换为 423 Locked (WebDAV) 响应，其余异常交给 DRF 默认处理。
#
# [Usage / 用法]
#     REST_FRAMEWORK = {
#         'EXCEPTION_HANDLER': 'recordlock.apps.lockable.contrib.rest_framework.exception_handler',
#     }
#
# ==============================================================================
"""
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from ..conf import get_setting
from ..exceptions import RecordLocked


def exception_handler(exc, context):
    if isinstance(exc, RecordLocked):
        return Response({
            "status": "locked",
            "message": exc.message,
            "model": exc.details.get('model'),
            "pk": exc.details.get('pk'),
        }, status=get_setting('DENIED_HTTP_STATUS'))
    return drf_exception_handler(exc, context)
