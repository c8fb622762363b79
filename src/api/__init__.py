"""API: camada de borda HTTP do gateway.

Responsabilidades:
- Receber requests HTTP e validar path params e bodies
- Traduzir erros de domínio em códigos HTTP
- Montar as respostas JSON do contrato público

Subpastas:
- routes/: endpoints HTTP (sessões, health)

NÃO PODE conter: FSM, regras de sessão, política de reconexão.
"""
