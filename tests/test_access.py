import unittest

from schoollink.core.access import AccessDecision, AccessGate
from schoollink.core.models import Role
from schoollink.core.views import View


class TestAccessGate(unittest.TestCase):

    def setUp(self):
        self.gate = AccessGate()

    def test_professor_entra_em_todas_as_telas(self):
        for view in View:
            with self.subTest(view=view):
                self.assertEqual(self.gate.can_enter(Role.TEACHER, view), AccessDecision.allow())

    def test_aluno_nao_entra_nas_telas_de_professor(self):
        for view in (View.ADD_EVENT, View.ADD_SCORES):
            with self.subTest(view=view):
                decisao = self.gate.can_enter(Role.STUDENT, view)
                self.assertFalse(decisao.allowed)
                self.assertEqual(decisao.fallback, View.STUDENT_DASHBOARD)

    def test_aluno_entra_nas_demais_telas(self):
        for view in set(View) - {View.ADD_EVENT, View.ADD_SCORES}:
            with self.subTest(view=view):
                self.assertTrue(self.gate.can_enter(Role.STUDENT, view).allowed)

    def test_sem_papel_so_entra_na_escolha_e_no_login(self):
        for view in View:
            with self.subTest(view=view):
                decisao = self.gate.can_enter(None, view)
                if view in (View.INITIAL_ROLE_CHOICE, View.LOGIN):
                    self.assertTrue(decisao.allowed)
                else:
                    self.assertEqual(decisao, AccessDecision.deny(View.INITIAL_ROLE_CHOICE))

    def test_decisao_e_deterministica(self):
        for role in (None, Role.TEACHER, Role.STUDENT):
            for view in View:
                self.assertEqual(self.gate.can_enter(role, view), self.gate.can_enter(role, view))


if __name__ == '__main__':
    unittest.main()
