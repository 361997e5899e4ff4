import unittest
from unittest.mock import MagicMock

from schoollink.core.errors import OperationFailed
from schoollink.core.retry import RetryPolicy


class TestRetryPolicy(unittest.TestCase):

    def setUp(self):
        self.esperas = []
        self.policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=self.esperas.append)

    def test_sucesso_na_primeira_tentativa_nao_espera(self):
        operacao = MagicMock(return_value='doc-1')

        self.assertEqual(self.policy.execute(operacao), 'doc-1')
        operacao.assert_called_once()
        self.assertEqual(self.esperas, [])

    def test_falha_duas_vezes_e_depois_sucede(self):
        operacao = MagicMock(side_effect=[ConnectionError("a"), ConnectionError("b"), 'ok'])

        resultado = self.policy.execute(operacao)

        self.assertEqual(resultado, 'ok')
        self.assertEqual(operacao.call_count, 3)
        self.assertEqual(self.esperas, [1.0, 2.0])

    def test_sempre_falha_propaga_a_ultima_causa(self):
        ultimo = ConnectionError("terceira")
        operacao = MagicMock(side_effect=[ConnectionError("primeira"), ConnectionError("segunda"), ultimo])

        with self.assertRaises(OperationFailed) as ctx:
            self.policy.execute(operacao)

        self.assertEqual(operacao.call_count, 3)
        self.assertIs(ctx.exception.cause, ultimo)
        self.assertIs(ctx.exception.__cause__, ultimo)
        self.assertEqual(self.esperas, [1.0, 2.0])

    def test_max_attempts_por_chamada(self):
        operacao = MagicMock(side_effect=ValueError("x"))

        with self.assertRaises(OperationFailed):
            self.policy.execute(operacao, max_attempts=1)

        operacao.assert_called_once()
        self.assertEqual(self.esperas, [])

    def test_espera_dobra_a_cada_tentativa(self):
        policy = RetryPolicy(max_attempts=5, base_delay=0.5)
        self.assertEqual([policy.delay_before(i) for i in range(5)], [0.0, 0.5, 1.0, 2.0, 4.0])

    def test_max_attempts_invalido(self):
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_max_attempts_invalido_por_chamada_nao_executa(self):
        for valor in (0, -1):
            with self.subTest(max_attempts=valor):
                operacao = MagicMock(return_value='ok')

                with self.assertRaises(ValueError):
                    self.policy.execute(operacao, max_attempts=valor)

                operacao.assert_not_called()
        self.assertEqual(self.esperas, [])


if __name__ == '__main__':
    unittest.main()
