"""API — camada de borda.

Responsabilidades:
- Receber requests HTTP do frontend de calendário
- Ler credenciais (cookies/Bearer) e validar corpos JSON
- Normalizar registros do Google Calendar para modelos internos

Subpastas:
- normalizers/: conversão de payloads externos → modelos internos
- routes/: endpoints HTTP (calendário, health)

NÃO PODE conter: retry, rate limit, cache ou orquestração de serviços.
"""
