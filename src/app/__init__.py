"""App: coração do gateway: ciclo de vida das sessões e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: casos de uso (mensagens e contatos)
- services/: política e agendamento de reconexão
- infra/: implementações concretas de IO (credenciais, QR, transporte)
- protocols/: contratos/interfaces
- sessions/: entidade, registro e gerenciador de sessões
- domain/: regras puras (endereços, contatos)
- observability/: correlação e métricas via logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
