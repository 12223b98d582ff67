"""
业务异常 - 由 main.py 中的异常处理器统一渲染为
{"code": <status>, "msg": <message>, "data": null}
"""


class ForumError(Exception):
    status_code = 500
    default_msg = "Error interno del servidor"

    def __init__(self, msg: str = None):
        self.msg = msg or self.default_msg
        super().__init__(self.msg)


class ValidationFailed(ForumError):
    status_code = 400
    default_msg = "Faltan campos requeridos"


class Unauthorized(ForumError):
    status_code = 401
    default_msg = "No autorizado"


class PermissionDenied(ForumError):
    status_code = 403
    default_msg = "No tienes permisos para realizar esta acción"


class NotFound(ForumError):
    status_code = 404
    default_msg = "Contenido no encontrado"
