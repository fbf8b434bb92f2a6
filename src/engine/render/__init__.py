"""
どこで: `engine.render` サブパッケージ。
何を: GPU バックエンド（ModernGL）・シェーダ読込・シーン描画パスの入口。
なぜ: カメラ/シーンの計算と GPU 呼び出しの責務を分離し、GPU リソース管理を局所化するため。
"""
