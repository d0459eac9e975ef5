# -*- coding: utf-8 -*-
"""
Extraction prompt builder.

One provider-independent prompt: the message, the three reference name
lists, the classification rules and the JSON reply template.
"""

import json
from datetime import date
from typing import Optional

from ledger.extraction.types import ExtractionRequest
from ledger.shared.reference_resolver import names

SYSTEM_PROMPT = "You are a financial assistant. Return JSON only."
RAW_JSON_SUFFIX = "\n\nReturn ONLY raw JSON, no markdown formatting."

RESPONSE_TEMPLATE = {
    "value": "0.00",
    "type": "income",
    "classification": "transaction",
    "category_name": "",
    "suggested_category": "",
    "description": "",
    "date": "YYYY-MM-DD",
    "account_name": "",
    "client_name": "",
    "weight": "",
    "shipping": "",
    "seller": "",
    "dev_code": "",
}


def _name_list(items) -> str:
    return ", ".join(names(items))


def build_extraction_prompt(request: ExtractionRequest, *, today: Optional[date] = None) -> str:
    """
    Build the extraction prompt for a request.

    Args:
        request: free text and reference lists
        today: reference date offered as default when the text has none

    Returns:
        The full prompt string
    """
    today_str = (today or date.today()).isoformat()
    template = json.dumps(RESPONSE_TEMPLATE, ensure_ascii=False, indent=2)

    prompt = f"""Você é um assistente financeiro que classifica mensagens de uma pequena empresa.

## Mensagem
"{request.text}"

## Listas disponíveis
- Categorias: [{_name_list(request.categories)}]
- Contas bancárias: [{_name_list(request.accounts)}]
- Clientes: [{_name_list(request.contacts)}]

## Classificação (campo "classification")
1. **sale**: venda de produtos, mercadorias ou serviços; pedidos, encomendas, orçamentos
   (ex.: "venda", "vendeu", "pedido", "encomenda", "cliente comprou").
2. **transaction**: pagamentos recebidos ou efetuados, despesas, contas a pagar/receber.
   - Receita (type "income"): "entrada", "recebimento", "receita", "recebi", "entrou", "Tipo: Receita".
   - Despesa (type "expense"): "despesa", "saída", "pagamento", "paguei", "gasto".
   - Gerais: "transferi", "pix", "boleto".
3. **discard**: conversa sem informação financeira (saudações, perguntas, conversa casual).

## Campos
- value: valor numérico em formato canônico com ponto decimal. Converta "1.234,56" para "1234.56".
  Um número sem separadores como "100002" é "100002.00".
- type: "income" (dinheiro recebido) ou "expense" (dinheiro pago).
- category_name: nome EXATO de uma categoria da lista, ou "" se não houver correspondência exata.
- suggested_category: quando category_name for "", sugira uma categoria (ex.: "Receitas", "Produtos").
- description: descrição completa que INCLUA o valor formatado (R$ X,XX),
  ex.: "Pagamento de R$ 500,00 ref. aluguel".
- date: converta datas DD/MM/AA ou DD/MM/AAAA para AAAA-MM-DD ("14/12/25" -> "2025-12-14").
  Uma data presente na mensagem tem prioridade; sem data, use {today_str}.
- account_name: nome EXATO de uma conta da lista, ou "".
- client_name: nome EXATO de um cliente da lista, ou "".
- weight: peso, se mencionado (apenas número).
- shipping: valor do frete, se mencionado.
- seller: nome do vendedor, se mencionado.
- dev_code: código de devolução, se mencionado (ex.: "Cód. Dev: 123").

## Resposta
Retorne APENAS um objeto JSON neste formato:
{template}
"""
    return prompt
