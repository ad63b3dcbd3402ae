import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class Notificador:
    """
    Assinatura de alterações de uma coleção.

    assinar(callback) entrega imediatamente o snapshot atual e depois um snapshot
    completo a cada publicar(); o retorno é a função que cancela a assinatura.
    """

    def __init__(self, obter_snapshot: Callable[[], List]):
        self.obter_snapshot = obter_snapshot
        self._assinantes: List[Callable[[List], None]] = []

    def assinar(self, callback: Callable[[List], None]) -> Callable[[], None]:
        self._assinantes.append(callback)
        callback(self.obter_snapshot())

        def cancelar():
            if callback in self._assinantes:
                self._assinantes.remove(callback)

        return cancelar

    @property
    def total_assinantes(self) -> int:
        return len(self._assinantes)

    def publicar(self):
        if not self._assinantes:
            return
        snapshot = self.obter_snapshot()
        for callback in list(self._assinantes):
            try:
                callback(snapshot)
            except Exception:
                # Um assinante com defeito não impede a entrega aos demais
                logger.exception("Falha ao notificar assinante %r", callback)
