"""
Proxy de contenido
Reenvía peticiones a servicios de transcripción, chat con Claude y al REST API de WordPress
"""

__version__ = "1.0.0"
