import unittest
from datetime import date

from schoollink.core.models import Event, Role
from schoollink.core.navigation import (
    AppContext,
    ChangeMonth,
    LoginSucceeded,
    Logout,
    Navigate,
    SelectRole,
    ShowEventDetails,
    ViewController,
    ViewState,
    transition,
)
from schoollink.core.views import View

HOJE = date(2025, 11, 18)

EVENTOS = (
    Event(id='1', title='Sports Day', date=date(2025, 10, 15)),
    Event(id='3', title='Model United Nations (MUN)', date=date(2025, 11, 20)),
    Event(id='2', title='Essay Writing Competition', date=date(2025, 11, 5)),
    Event(id='4', title='Photography Contest', date=date(2025, 12, 1)),
)


def controller_logado(role):
    controller = ViewController(today=lambda: HOJE)
    controller.select_role(role)
    controller.login_succeeded(role)
    return controller


class TestTransition(unittest.TestCase):

    def test_estado_inicial(self):
        self.assertEqual(ViewState().view, View.INITIAL_ROLE_CHOICE)

    def test_acao_fora_de_contexto_devolve_o_mesmo_estado(self):
        estado = ViewState(view=View.NOTICE_BOARD)
        for acao in (ChangeMonth(1), ShowEventDetails(EVENTOS), LoginSucceeded(Role.TEACHER), SelectRole(Role.STUDENT)):
            with self.subTest(acao=acao):
                self.assertIs(transition(estado, acao, Role.TEACHER, today=HOJE), estado)

    def test_navigate_para_login_e_ignorado(self):
        estado = ViewState()
        self.assertIs(transition(estado, Navigate(View.LOGIN), None, today=HOJE), estado)

    def test_logout_de_qualquer_tela(self):
        for view in View:
            with self.subTest(view=view):
                self.assertEqual(transition(ViewState(view=view), Logout(), Role.TEACHER), ViewState())

    def test_sem_papel_volta_para_a_escolha(self):
        novo = transition(ViewState(view=View.LOGIN), Navigate(View.NOTICE_BOARD), None, today=HOJE)
        self.assertEqual(novo.view, View.INITIAL_ROLE_CHOICE)

    def test_change_month_vira_o_ano(self):
        estado = ViewState(view=View.EVENT_CALENDAR, calendar_month=(2025, 12))
        self.assertEqual(transition(estado, ChangeMonth(1), Role.STUDENT).calendar_month, (2026, 1))
        self.assertEqual(transition(estado, ChangeMonth(-12), Role.STUDENT).calendar_month, (2024, 12))


class TestViewController(unittest.TestCase):

    def test_fluxo_de_login_do_professor(self):
        controller = ViewController(today=lambda: HOJE)

        controller.select_role(Role.TEACHER)
        self.assertEqual(controller.view, View.LOGIN)
        self.assertEqual(controller.context.target_role, Role.TEACHER)
        self.assertIsNone(controller.context.role)

        controller.login_succeeded(Role.TEACHER)
        self.assertEqual(controller.view, View.TEACHER_DASHBOARD)
        self.assertEqual(controller.context.role, Role.TEACHER)
        self.assertIsNone(controller.context.target_role)

    def test_login_com_papel_diferente_do_escolhido_e_ignorado(self):
        controller = ViewController(today=lambda: HOJE)
        controller.select_role(Role.STUDENT)

        controller.login_succeeded(Role.TEACHER)

        self.assertEqual(controller.view, View.LOGIN)
        self.assertIsNone(controller.context.role)

    def test_aluno_redirecionado_ao_tentar_adicionar_evento(self):
        controller = controller_logado(Role.STUDENT)
        controller.navigate(View.EVENT_CALENDAR)

        controller.navigate(View.ADD_EVENT)

        self.assertEqual(controller.view, View.STUDENT_DASHBOARD)
        self.assertEqual(controller.context.role, Role.STUDENT)

    def test_logout_limpa_o_papel(self):
        for view in (View.ADD_SCORES, View.EVENT_DETAILS, View.NOTICE_BOARD, View.EVENT_CALENDAR):
            with self.subTest(view=view):
                controller = controller_logado(Role.TEACHER)
                controller.navigate(view)

                controller.logout()

                self.assertEqual(controller.view, View.INITIAL_ROLE_CHOICE)
                self.assertIsNone(controller.context.role)
                self.assertIsNone(controller.context.target_role)

    def test_voltar_para_a_escolha_de_papel_tambem_desloga(self):
        controller = controller_logado(Role.STUDENT)

        controller.navigate(View.INITIAL_ROLE_CHOICE)

        self.assertIsNone(controller.context.role)

    def test_calendario_abre_no_mes_atual(self):
        controller = controller_logado(Role.STUDENT)

        controller.navigate(View.EVENT_CALENDAR)

        self.assertEqual(controller.state.calendar_month, (2025, 11))
        self.assertEqual(controller.displayed_month(), (2025, 11))

    def test_detalhes_pelo_calendario_levam_so_o_mes_exibido(self):
        controller = controller_logado(Role.STUDENT)
        controller.navigate(View.EVENT_CALENDAR)

        controller.open_event_details(EVENTOS)

        self.assertEqual(controller.view, View.EVENT_DETAILS)
        self.assertEqual([e.id for e in controller.state.selected_events], ['2', '3'])
        self.assertEqual([e.id for e in controller.details_events(EVENTOS)], ['2', '3'])

    def test_detalhes_depois_de_mudar_o_mes(self):
        controller = controller_logado(Role.TEACHER)
        controller.navigate(View.EVENT_CALENDAR)
        controller.change_month(1)

        controller.open_event_details(EVENTOS)

        self.assertEqual([e.id for e in controller.state.selected_events], ['4'])

    def test_detalhes_abertos_direto_mostram_tudo(self):
        controller = controller_logado(Role.STUDENT)

        controller.navigate(View.EVENT_DETAILS)

        self.assertIsNone(controller.state.selected_events)
        self.assertEqual(controller.details_events(EVENTOS), EVENTOS)

    def test_sair_dos_detalhes_limpa_a_lista_filtrada(self):
        controller = controller_logado(Role.STUDENT)
        controller.navigate(View.EVENT_CALENDAR)
        controller.open_event_details(EVENTOS)

        controller.back_to_dashboard()
        controller.navigate(View.EVENT_DETAILS)

        self.assertIsNone(controller.state.selected_events)

    def test_open_event_details_fora_do_calendario_nao_faz_nada(self):
        controller = controller_logado(Role.STUDENT)

        controller.open_event_details(EVENTOS)

        self.assertEqual(controller.view, View.STUDENT_DASHBOARD)


class TestSerializacao(unittest.TestCase):

    def test_view_state_descarta_eventos_que_sumiram(self):
        estado = ViewState(view=View.EVENT_DETAILS, selected_events=(EVENTOS[1], EVENTOS[2]))

        restaurado = ViewState.from_dict(estado.to_dict(), events=[EVENTOS[2]])

        self.assertEqual(restaurado.view, View.EVENT_DETAILS)
        self.assertEqual(restaurado.selected_events, (EVENTOS[2],))

    def test_view_state_invalido_volta_ao_inicio(self):
        self.assertEqual(ViewState.from_dict({'view': 'Inexistente'}), ViewState())
        self.assertEqual(ViewState.from_dict(None), ViewState())

    def test_app_context_ignora_papel_desconhecido(self):
        contexto = AppContext.from_dict({'role': 'Admin', 'target_role': 'Student'}, identity_token='uid')

        self.assertIsNone(contexto.role)
        self.assertEqual(contexto.target_role, Role.STUDENT)
        self.assertEqual(contexto.identity_token, 'uid')


if __name__ == '__main__':
    unittest.main()
