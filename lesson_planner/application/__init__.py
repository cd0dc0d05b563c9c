"""
Application layer package.

Contains application services and the message handlers they dispatch to.
Application services compose the current user, the message bus and the
object mapper. This layer depends on domain ports, never on infrastructure.
"""
