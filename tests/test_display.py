import unittest
from datetime import date, datetime, timezone

from schoollink.core.display import (
    blank_score_sheet,
    events_in_month,
    group_events_by_date,
    month_grid,
    shift_month,
    sort_notices,
    sort_publications,
    sort_results,
)
from schoollink.core.models import Event, Notice, ScorePublication, ScoreResult


def evento(doc_id, dia, mes=11):
    return Event(id=doc_id, title=f"Evento {doc_id}", date=date(2025, mes, dia))


class TestEventos(unittest.TestCase):

    def test_agrupa_por_data_em_ordem_crescente(self):
        eventos = [evento('a', 20), evento('b', 5), evento('c', 20), evento('d', 1, mes=12)]

        grupos = group_events_by_date(eventos)

        self.assertEqual(list(grupos), [date(2025, 11, 5), date(2025, 11, 20), date(2025, 12, 1)])
        self.assertEqual([e.id for e in grupos[date(2025, 11, 20)]], ['a', 'c'])

    def test_events_in_month(self):
        eventos = [evento('a', 20), evento('b', 1, mes=12), evento('c', 2)]
        self.assertEqual([e.id for e in events_in_month(eventos, 2025, 11)], ['c', 'a'])

    def test_shift_month(self):
        self.assertEqual(shift_month(2025, 1, -1), (2024, 12))
        self.assertEqual(shift_month(2025, 11, 14), (2027, 1))

    def test_grade_de_novembro_de_2025(self):
        grade = month_grid(2025, 11, [evento('a', 5), evento('b', 5), evento('c', 20)], today=date(2025, 11, 18))

        self.assertEqual(grade['title'], 'November 2025')
        # 1º de novembro de 2025 é um sábado
        self.assertEqual(grade['leading_blanks'], 6)
        self.assertEqual(len(grade['days']), 30)
        self.assertEqual(grade['days'][4]['events'], 2)
        self.assertEqual(grade['days'][19]['events'], 1)
        self.assertEqual([d['day'] for d in grade['days'] if d['is_today']], [18])

    def test_mes_que_comeca_no_domingo(self):
        # 1º de junho de 2025 é um domingo
        self.assertEqual(month_grid(2025, 6, [])['leading_blanks'], 0)


class TestOrdenacao(unittest.TestCase):

    def test_avisos_mais_recentes_primeiro(self):
        avisos = [
            Notice('a', 'antigo', created_at=datetime(2025, 11, 1, tzinfo=timezone.utc)),
            Notice('b', 'sem data'),
            Notice('c', 'novo', created_at=datetime(2025, 11, 3, tzinfo=timezone.utc)),
        ]
        self.assertEqual([n.id for n in sort_notices(avisos)], ['c', 'a', 'b'])

    def test_publicacoes_mais_recentes_primeiro(self):
        publicacoes = [
            ScorePublication('1', 'A', published_at=datetime(2025, 10, 1, tzinfo=timezone.utc)),
            ScorePublication('2', 'B', published_at=datetime(2025, 11, 1, tzinfo=timezone.utc)),
        ]
        self.assertEqual([p.id for p in sort_publications(publicacoes)], ['2', '1'])

    def test_resultados_em_ordem_natural_de_colocacao(self):
        resultados = [
            ScoreResult('a', 'A', rank='10th'),
            ScoreResult('b', 'B', rank='2nd'),
            ScoreResult('c', 'C', rank='1ST'),
            ScoreResult('d', 'D', rank=''),
        ]
        self.assertEqual([r.student_id for r in sort_results(resultados)], ['d', 'c', 'b', 'a'])

    def test_planilha_vazia_tem_uma_linha_por_aluno(self):
        planilha = blank_score_sheet()

        self.assertEqual([r.student_id for r in planilha], ['student-A', 'student-B', 'student-C', 'student-D'])
        self.assertTrue(all(r.is_blank for r in planilha))


if __name__ == '__main__':
    unittest.main()
