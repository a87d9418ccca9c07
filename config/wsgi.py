# config/wsgi.py

import os
from django.core.wsgi import get_wsgi_application

# Produção por padrão: exige REDIS_URL para o lock de movimentação
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

application = get_wsgi_application()
